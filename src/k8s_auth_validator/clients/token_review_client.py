"""Kubernetes TokenReview client for exercising reviewer JWTs."""

import json
import warnings
from typing import Any

from kubernetes import client
from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import HTTPError as Urllib3HTTPError
from urllib3.exceptions import InsecureRequestWarning

from k8s_auth_validator.core.config import DEFAULT_REQUEST_TIMEOUT_SECONDS
from k8s_auth_validator.core.exceptions import TokenReviewError
from k8s_auth_validator.core.models import TokenReviewOutcome
from k8s_auth_validator.utils.logging import get_logger

logger = get_logger(__name__)

TOKEN_REVIEW_KIND = "TokenReview"
TOKEN_REVIEW_API_VERSION = "authentication.k8s.io/v1"


def build_token_review(token: str) -> client.V1TokenReview:
    """Build a TokenReview request body for a token.

    Args:
        token: JWT to review

    Returns:
        V1TokenReview with the token in its spec
    """
    return client.V1TokenReview(
        api_version=TOKEN_REVIEW_API_VERSION,
        kind=TOKEN_REVIEW_KIND,
        spec=client.V1TokenReviewSpec(token=token),
    )


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


class TokenReviewClient:
    """Calls a cluster's TokenReview API with certificate verification disabled.

    Verification is relaxed only on the per-call Configuration built here.
    """

    def __init__(self, timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS):
        """Initialize TokenReview client.

        Args:
            timeout: Per-request timeout in seconds
        """
        self.timeout = timeout

    def _build_api(self, host: str, bearer_token: str) -> client.AuthenticationV1Api:
        configuration = client.Configuration()
        configuration.host = host
        configuration.verify_ssl = False
        configuration.api_key = {"authorization": bearer_token}
        configuration.api_key_prefix = {"authorization": "Bearer"}
        return client.AuthenticationV1Api(client.ApiClient(configuration))

    def create_token_review(self, host: str, reviewer_jwt: str) -> dict[str, Any]:
        """POST a TokenReview of the reviewer JWT, authenticated as that JWT.

        The body is decoded as plain JSON since responses may omit the echoed spec.

        Args:
            host: Kubernetes API server URL as recorded on the gateway
            reviewer_jwt: Token reviewer JWT

        Returns:
            Decoded TokenReview response body

        Raises:
            TokenReviewError: If the call fails, the API server rejects it,
                or the response is not a JSON object
        """
        api = self._build_api(host, reviewer_jwt)
        try:
            with warnings.catch_warnings():
                warnings.simplefilter("ignore", InsecureRequestWarning)
                response = api.create_token_review(
                    body=build_token_review(reviewer_jwt),
                    _request_timeout=self.timeout,
                    _preload_content=False,
                )
            payload = json.loads(response.data)
        except ApiException as e:
            raise TokenReviewError(f"TokenReview failed: {e.status} {e.reason}") from e
        except (Urllib3HTTPError, OSError) as e:
            raise TokenReviewError(f"TokenReview request to {host} failed: {e}") from e
        except ValueError as e:
            raise TokenReviewError(f"TokenReview response from {host} is not valid JSON") from e
        finally:
            api.api_client.close()

        if not isinstance(payload, dict):
            raise TokenReviewError(f"TokenReview response from {host} is not a JSON object")
        return payload

    def review(self, host: str, reviewer_jwt: str) -> TokenReviewOutcome:
        """Exercise a reviewer JWT and interpret the result.

        Args:
            host: Kubernetes API server URL as recorded on the gateway
            reviewer_jwt: Token reviewer JWT

        Returns:
            TokenReviewOutcome; failures are recorded as unauthenticated with error detail
        """
        logger.debug("token_review_started", host=host)

        try:
            review = self.create_token_review(host, reviewer_jwt)
        except TokenReviewError as e:
            logger.warning("token_review_failed", host=host, error=str(e))
            return TokenReviewOutcome(authenticated=False, error=str(e))

        status = review.get("status")
        if not isinstance(status, dict):
            logger.warning("token_review_missing_status", host=host)
            return TokenReviewOutcome(authenticated=False)

        user = _as_dict(status.get("user"))
        outcome = TokenReviewOutcome(
            authenticated=status.get("authenticated") is True,
            username=user.get("username") or None,
            uid=user.get("uid") or None,
            groups=list(user.get("groups") or []),
            audiences=list(status.get("audiences") or []),
            error=status.get("error") or None,
        )

        logger.info(
            "token_review_completed",
            host=host,
            authenticated=outcome.authenticated,
            username=outcome.username,
        )
        return outcome
