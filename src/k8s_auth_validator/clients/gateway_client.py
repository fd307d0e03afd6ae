"""Gateway client for the control-plane directory and per-gateway auth configs."""

from typing import Any

import httpx
from pydantic import ValidationError

from k8s_auth_validator.core.config import (
    DEFAULT_API_GATEWAY_URL,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
)
from k8s_auth_validator.core.exceptions import (
    DirectoryUnavailableError,
    GatewayFetchError,
    MissingTokenError,
)
from k8s_auth_validator.core.models import FetchResult, GatewayIdentity, KubeAuthConfig
from k8s_auth_validator.utils.logging import get_logger

logger = get_logger(__name__)

LIST_GATEWAYS_PATH = "/list-gateways"
K8S_AUTHS_PATH = "/config/k8s-auths"


class GatewayClient:
    """HTTP client for the gateway directory and gateway config endpoints.

    Every call is attempted exactly once. Certificate verification stays on;
    only the TokenReview client relaxes it.
    """

    def __init__(
        self,
        api_gateway_url: str = DEFAULT_API_GATEWAY_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize gateway client.

        Args:
            api_gateway_url: Control-plane API base URL
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.api_gateway_url = api_gateway_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.Client(timeout=httpx.Timeout(timeout), transport=transport)

        logger.debug("gateway_client_initialized", api_gateway_url=self.api_gateway_url)

    def __enter__(self) -> "GatewayClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._client.close()

    def list_gateways(self, token: str) -> list[GatewayIdentity]:
        """List every gateway cluster known to the control plane.

        Args:
            token: Control-plane access token

        Returns:
            Full directory in the order the control plane returned it

        Raises:
            MissingTokenError: If token is empty
            DirectoryUnavailableError: If the directory cannot be retrieved or parsed
        """
        if not token:
            raise MissingTokenError(
                "Access token is not set. Use the -t/--token flag or the AKEYLESS_TOKEN "
                "environment variable"
            )

        url = self.api_gateway_url + LIST_GATEWAYS_PATH
        logger.debug("listing_gateways", url=url)

        try:
            response = self._client.post(url, json={"token": token})
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("list_gateways_failed", url=url, status=e.response.status_code)
            raise DirectoryUnavailableError(
                f"Unable to retrieve list of gateways: HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("list_gateways_failed", url=url, error=str(e))
            raise DirectoryUnavailableError(f"Unable to retrieve list of gateways: {e}") from e
        except ValueError as e:
            logger.error("list_gateways_invalid_payload", url=url, error=str(e))
            raise DirectoryUnavailableError("Gateway list response is not valid JSON") from e

        gateways = self._parse_directory(payload)
        logger.info("gateways_listed", count=len(gateways))
        return gateways

    @staticmethod
    def _parse_directory(payload: Any) -> list[GatewayIdentity]:
        if not isinstance(payload, dict):
            raise DirectoryUnavailableError("Gateway list response is not a JSON object")

        clusters = payload.get("clusters") or []
        if not isinstance(clusters, list):
            raise DirectoryUnavailableError("Gateway list response 'clusters' is not a list")

        try:
            return [GatewayIdentity.model_validate(entry) for entry in clusters]
        except ValidationError as e:
            raise DirectoryUnavailableError(f"Malformed gateway entry: {e}") from e

    def fetch_auth_configs(self, gateway: GatewayIdentity, token: str) -> FetchResult:
        """Fetch the Kubernetes auth configs registered on one gateway.

        Failures are returned as a FAILED result rather than raised, so one
        unreachable gateway does not stop the others from being inspected.

        Args:
            gateway: Gateway directory entry (its cluster URL is required)
            token: Control-plane access token, sent as bearer credential

        Returns:
            FetchResult tagged OK, EMPTY or FAILED
        """
        try:
            configs = self._request_auth_configs(gateway, token)
        except GatewayFetchError as e:
            logger.warning(
                "gateway_auth_configs_fetch_failed",
                cluster_name=gateway.cluster_name,
                cluster_url=gateway.cluster_url,
                error=str(e),
            )
            return FetchResult.failed(str(e))

        logger.debug(
            "gateway_auth_configs_fetched",
            cluster_name=gateway.cluster_name,
            count=len(configs),
            names=[config.name for config in configs],
        )
        return FetchResult.from_configs(configs)

    def _request_auth_configs(self, gateway: GatewayIdentity, token: str) -> list[KubeAuthConfig]:
        if not gateway.cluster_url:
            raise GatewayFetchError(f"Gateway {gateway.cluster_name} has no cluster URL set")

        url = gateway.cluster_url.rstrip("/") + K8S_AUTHS_PATH
        logger.debug("fetching_gateway_auth_configs", url=url)

        try:
            response = self._client.get(url, headers={"Authorization": f"Bearer {token}"})
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise GatewayFetchError(f"HTTP {e.response.status_code} from {url}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise GatewayFetchError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise GatewayFetchError(f"Response from {url} is not valid JSON") from e

        if not isinstance(payload, dict):
            raise GatewayFetchError(f"Response from {url} is not a JSON object")

        entries = payload.get("k8s_auths") or []
        if not isinstance(entries, list):
            raise GatewayFetchError(f"Response from {url} has a non-list 'k8s_auths'")

        try:
            return [KubeAuthConfig.model_validate(entry) for entry in entries]
        except ValidationError as e:
            raise GatewayFetchError(f"Malformed auth config from {url}: {e}") from e
