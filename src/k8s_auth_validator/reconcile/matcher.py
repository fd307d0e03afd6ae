"""Matching gateway auth configs against the local cluster."""

from k8s_auth_validator.core.models import GatewayAuthConfigs, MatchResult
from k8s_auth_validator.utils.logging import get_logger

logger = get_logger(__name__)


def match(
    aggregate: list[GatewayAuthConfigs],
    local_host: str,
    local_ca_base64: str,
) -> list[MatchResult]:
    """Find every auth config registered for the local cluster host.

    Hosts and CAs are compared as exact strings. A host that differs only by a
    trailing slash or scheme case does not match.

    Args:
        aggregate: Gateways with their auth configs, in directory order
        local_host: API server URL from the local kubeconfig
        local_ca_base64: Base64 encoded CA data from the local kubeconfig

    Returns:
        Matches in traversal order (empty if no gateway trusts this cluster)
    """
    matches = []

    for entry in aggregate:
        for config in entry.configs:
            if config.k8s_host != local_host:
                continue

            ca_matches = config.k8s_ca_cert == local_ca_base64
            matches.append(MatchResult(gateway=entry.gateway, config=config, ca_matches=ca_matches))

            logger.info(
                "auth_config_matched",
                cluster_name=entry.gateway.cluster_name,
                config_name=config.name,
                access_id=config.auth_method_access_id,
                ca_matches=ca_matches,
            )

    if not matches:
        logger.info("no_auth_config_matched", host=local_host)

    return matches
