"""Gateway eligibility filtering."""

from k8s_auth_validator.core.models import GatewayIdentity, GatewayStatus

DEFAULT_CLUSTER_PLACEHOLDER = "defaultCluster"


def usable_name(gateway: GatewayIdentity) -> str:
    """Resolve the name a gateway is shown and filtered by.

    Display name wins. Otherwise the last segment of a path-style cluster name is
    used, unless it is the provisioning placeholder, in which case the full
    cluster name is kept.

    Args:
        gateway: Gateway directory entry

    Returns:
        Usable gateway name (may be empty if the entry has no names at all)
    """
    if gateway.display_name:
        return gateway.display_name

    cluster_name = gateway.cluster_name or ""
    leaf = cluster_name.rsplit("/", 1)[-1]
    if leaf and leaf != DEFAULT_CLUSTER_PLACEHOLDER:
        return leaf

    return cluster_name


def is_eligible(gateway: GatewayIdentity, name_filter: str = "") -> bool:
    """Decide whether a gateway's auth configs should be collected.

    Args:
        gateway: Gateway directory entry
        name_filter: Case-sensitive prefix for the usable name; empty disables filtering

    Returns:
        True if the gateway is running, has a URL and matches the filter
    """
    if gateway.status != GatewayStatus.RUNNING.value:
        return False

    if not gateway.cluster_url:
        return False

    if name_filter:
        return usable_name(gateway).startswith(name_filter)

    return True
