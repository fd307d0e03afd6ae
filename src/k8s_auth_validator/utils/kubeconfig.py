"""Local kubeconfig reading for the cluster under inspection."""

import base64
import binascii
import os
from pathlib import Path
from typing import Any

import yaml

from k8s_auth_validator.core.exceptions import KubeconfigError
from k8s_auth_validator.core.models import LocalClusterIdentity
from k8s_auth_validator.utils.logging import get_logger

logger = get_logger(__name__)


def default_kubeconfig_path() -> Path:
    """Resolve the kubeconfig path kubectl would use.

    Returns:
        First entry of $KUBECONFIG if set, otherwise ~/.kube/config
    """
    env_value = os.environ.get("KUBECONFIG", "")
    for entry in env_value.split(os.pathsep):
        if entry:
            return Path(entry).expanduser()
    return Path.home() / ".kube" / "config"


def _named_entry(entries: list[dict[str, Any]] | None, name: str, section: str) -> dict[str, Any]:
    for entry in entries or []:
        if isinstance(entry, dict) and entry.get("name") == name:
            return entry.get(section) or {}
    raise KubeconfigError(f"{section.capitalize()} '{name}' not found in kubeconfig")


def _read_ca_data(cluster: dict[str, Any], base_dir: Path) -> bytes:
    ca_data = cluster.get("certificate-authority-data")
    if ca_data:
        try:
            return base64.b64decode(ca_data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise KubeconfigError(f"Invalid certificate-authority-data: {e}") from e

    ca_file = cluster.get("certificate-authority")
    if ca_file:
        ca_path = Path(ca_file).expanduser()
        if not ca_path.is_absolute():
            ca_path = base_dir / ca_path
        try:
            return ca_path.read_bytes()
        except OSError as e:
            raise KubeconfigError(f"Failed to read certificate authority {ca_path}: {e}") from e

    return b""


def load_local_cluster(
    kubeconfig_path: str | Path | None = None,
    context: str | None = None,
) -> LocalClusterIdentity:
    """Load the identity of the cluster selected by a kubeconfig.

    Args:
        kubeconfig_path: Path to kubeconfig file (defaults to kubectl's resolution)
        context: Context to use instead of current-context (optional)

    Returns:
        LocalClusterIdentity for the selected context

    Raises:
        KubeconfigError: If the file cannot be read or the context cannot be resolved
    """
    path = Path(kubeconfig_path).expanduser() if kubeconfig_path else default_kubeconfig_path()
    logger.debug("loading_kubeconfig", path=str(path))

    if not path.exists():
        raise KubeconfigError(f"Kubeconfig not found: {path}")

    try:
        with path.open() as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise KubeconfigError(f"Failed to load kubeconfig {path}: {e}") from e

    if not isinstance(config, dict):
        raise KubeconfigError(f"Kubeconfig {path} is empty or not a mapping")

    context_name = context or config.get("current-context")
    if not context_name:
        raise KubeconfigError(f"No current-context set in {path}")

    context_details = _named_entry(config.get("contexts"), context_name, "context")
    cluster_name = context_details.get("cluster")
    if not cluster_name:
        raise KubeconfigError(f"Context '{context_name}' does not reference a cluster")

    cluster_details = _named_entry(config.get("clusters"), cluster_name, "cluster")
    host = cluster_details.get("server")
    if not host:
        raise KubeconfigError(f"Cluster '{cluster_name}' has no server configured")

    identity = LocalClusterIdentity(
        context_name=context_name,
        cluster_name=cluster_name,
        namespace=context_details.get("namespace"),
        user=context_details.get("user"),
        host=host,
        ca_data=_read_ca_data(cluster_details, path.parent),
    )

    logger.info(
        "kubeconfig_loaded",
        path=str(path),
        context=context_name,
        cluster=cluster_name,
        host=host,
    )
    return identity
