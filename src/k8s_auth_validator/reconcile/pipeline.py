"""End-to-end reconciliation run."""

from __future__ import annotations

from typing import TYPE_CHECKING

from k8s_auth_validator.core.exceptions import MissingTokenError
from k8s_auth_validator.core.models import LocalClusterIdentity, ReconciliationReport
from k8s_auth_validator.reconcile.aggregator import aggregate
from k8s_auth_validator.reconcile.matcher import match
from k8s_auth_validator.utils.logging import get_logger

if TYPE_CHECKING:
    from k8s_auth_validator.clients.gateway_client import GatewayClient
    from k8s_auth_validator.reconcile.validator import CredentialValidator

logger = get_logger(__name__)


class ReconciliationPipeline:
    """Runs directory listing, aggregation, matching and validation in order.

    Only precondition failures (missing token, unavailable directory) are
    raised. Everything else ends up in the returned report.
    """

    def __init__(self, gateway_client: GatewayClient, validator: CredentialValidator):
        """Initialize pipeline.

        Args:
            gateway_client: Client for the directory and gateway config endpoints
            validator: Validator for matched configs
        """
        self.gateway_client = gateway_client
        self.validator = validator

    def run(
        self,
        local_cluster: LocalClusterIdentity,
        token: str,
        name_filter: str = "",
        validate_tokens: bool = True,
    ) -> ReconciliationReport:
        """Run one reconciliation.

        Args:
            local_cluster: Identity of the local cluster
            token: Control-plane access token
            name_filter: Gateway usable-name prefix filter (empty for all)
            validate_tokens: Exercise reviewer JWTs of matched configs

        Returns:
            ReconciliationReport

        Raises:
            MissingTokenError: If token is empty
            DirectoryUnavailableError: If the gateway directory cannot be listed
        """
        if not token:
            raise MissingTokenError(
                "Access token is not set. Use the -t/--token flag or the AKEYLESS_TOKEN "
                "environment variable"
            )

        logger.info(
            "reconciliation_started",
            context=local_cluster.context_name,
            host=local_cluster.host,
            name_filter=name_filter or None,
        )

        directory = self.gateway_client.list_gateways(token)
        collected = aggregate(directory, name_filter, self.gateway_client, token)
        matches = match(collected.entries, local_cluster.host, local_cluster.ca_base64)

        if validate_tokens:
            matches = self.validator.validate_all(matches)
        else:
            logger.info("token_review_skipped", matches=len(matches))

        report = ReconciliationReport(
            local_cluster=local_cluster,
            name_filter=name_filter,
            gateways_listed=len(directory),
            gateways_eligible=collected.eligible_count,
            aggregate=collected.entries,
            fetch_failures=collected.failures,
            matches=matches,
        )

        logger.info(
            "reconciliation_completed",
            matches=len(report.matches),
            configs=report.config_count,
        )
        return report
