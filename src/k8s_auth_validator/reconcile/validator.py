"""Validation of matched auth configs against the live cluster."""

from k8s_auth_validator.clients.token_review_client import TokenReviewClient
from k8s_auth_validator.core.models import MatchResult, TokenReviewOutcome
from k8s_auth_validator.utils.logging import get_logger

logger = get_logger(__name__)


class CredentialValidator:
    """Exercises each matched config's token reviewer JWT via TokenReview."""

    def __init__(self, token_review_client: TokenReviewClient | None = None):
        """Initialize credential validator.

        Args:
            token_review_client: Client for TokenReview calls (created if omitted)
        """
        self.token_review_client = token_review_client or TokenReviewClient()

    def validate(self, match_result: MatchResult) -> TokenReviewOutcome:
        """Validate one matched auth config.

        A non-authenticated outcome is a diagnostic finding, not an error.

        Args:
            match_result: Matched auth config

        Returns:
            TokenReviewOutcome for the config's reviewer JWT
        """
        config = match_result.config
        outcome = self.token_review_client.review(config.k8s_host, config.k8s_token_reviewer_jwt)

        if not outcome.authenticated:
            logger.warning(
                "token_reviewer_jwt_not_valid",
                config_name=config.name,
                access_id=config.auth_method_access_id,
                error=outcome.error,
            )

        return outcome

    def validate_all(self, matches: list[MatchResult]) -> list[MatchResult]:
        """Validate every match sequentially.

        Args:
            matches: Matched auth configs

        Returns:
            Copies of the matches with their outcome filled in, same order
        """
        return [m.model_copy(update={"outcome": self.validate(m)}) for m in matches]
