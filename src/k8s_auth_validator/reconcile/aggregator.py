"""Collection of Kubernetes auth configs across eligible gateways."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from k8s_auth_validator.core.models import (
    FetchStatus,
    GatewayAuthConfigs,
    GatewayFetchFailure,
    GatewayIdentity,
)
from k8s_auth_validator.reconcile.filter import is_eligible, usable_name
from k8s_auth_validator.utils.logging import get_logger

if TYPE_CHECKING:
    from k8s_auth_validator.clients.gateway_client import GatewayClient

logger = get_logger(__name__)


@dataclass
class AggregationResult:
    """Auth configs collected in one pass over the directory."""

    entries: list[GatewayAuthConfigs] = field(default_factory=list)
    failures: list[GatewayFetchFailure] = field(default_factory=list)
    eligible_count: int = 0


def aggregate(
    directory: list[GatewayIdentity],
    name_filter: str,
    fetcher: GatewayClient,
    token: str,
) -> AggregationResult:
    """Fetch auth configs from every eligible gateway, in directory order.

    Gateways whose fetch comes back empty or failed contribute no entry.
    Failures are kept for reporting only. Repeated directory entries are
    fetched and kept as many times as they appear.

    Args:
        directory: Full gateway directory
        name_filter: Usable-name prefix filter (empty for all)
        fetcher: Client used to fetch each gateway's auth configs
        token: Control-plane access token

    Returns:
        AggregationResult with the non-empty gateways and any fetch failures
    """
    result = AggregationResult()

    if name_filter:
        logger.info("gateway_name_filter_applied", name_filter=name_filter)

    for gateway in directory:
        if not is_eligible(gateway, name_filter):
            logger.debug(
                "gateway_skipped",
                cluster_name=gateway.cluster_name,
                usable_name=usable_name(gateway),
                status=gateway.status,
                has_url=bool(gateway.cluster_url),
            )
            continue

        result.eligible_count += 1
        logger.debug(
            "gateway_eligible",
            usable_name=usable_name(gateway),
            cluster_url=gateway.cluster_url,
        )

        fetched = fetcher.fetch_auth_configs(gateway, token)

        if fetched.status == FetchStatus.FAILED:
            result.failures.append(
                GatewayFetchFailure(gateway=gateway, error=fetched.error or "unknown error")
            )
            continue

        if fetched.status == FetchStatus.EMPTY:
            continue

        result.entries.append(GatewayAuthConfigs(gateway=gateway, configs=fetched.configs))

    logger.info(
        "gateway_auth_configs_aggregated",
        listed=len(directory),
        eligible=result.eligible_count,
        with_configs=len(result.entries),
        failed=len(result.failures),
    )
    return result
