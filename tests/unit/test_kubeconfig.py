"""Tests for local kubeconfig reading."""

import base64
from pathlib import Path

import pytest
import yaml

from k8s_auth_validator.core.exceptions import KubeconfigError
from k8s_auth_validator.utils.kubeconfig import default_kubeconfig_path, load_local_cluster

CA_PEM = b"-----BEGIN CERTIFICATE-----\nMIIBtest\n-----END CERTIFICATE-----\n"


def _write_kubeconfig(path: Path, **overrides) -> Path:
    config = {
        "apiVersion": "v1",
        "kind": "Config",
        "current-context": "prod-eu-admin",
        "clusters": [
            {
                "name": "prod-eu",
                "cluster": {
                    "server": "https://api.prod-eu.example.com:6443",
                    "certificate-authority-data": base64.b64encode(CA_PEM).decode(),
                },
            },
            {"name": "staging", "cluster": {"server": "https://api.staging.example.com"}},
        ],
        "contexts": [
            {
                "name": "prod-eu-admin",
                "context": {"cluster": "prod-eu", "user": "admin", "namespace": "payments"},
            },
            {"name": "staging", "context": {"cluster": "staging", "user": "dev"}},
        ],
        "users": [{"name": "admin", "user": {"token": "t"}}, {"name": "dev", "user": {}}],
    }
    config.update(overrides)
    path.write_text(yaml.safe_dump(config))
    return path


@pytest.fixture
def kubeconfig_path(tmp_path: Path) -> Path:
    """Write a two-context kubeconfig file."""
    return _write_kubeconfig(tmp_path / "config")


class TestLoadLocalCluster:
    """Tests for load_local_cluster."""

    def test_current_context(self, kubeconfig_path) -> None:
        """Test the current context's cluster host and CA are loaded."""
        identity = load_local_cluster(kubeconfig_path)

        assert identity.context_name == "prod-eu-admin"
        assert identity.cluster_name == "prod-eu"
        assert identity.namespace == "payments"
        assert identity.user == "admin"
        assert identity.host == "https://api.prod-eu.example.com:6443"
        assert identity.ca_data == CA_PEM
        assert identity.ca_base64 == base64.b64encode(CA_PEM).decode()

    def test_explicit_context(self, kubeconfig_path) -> None:
        """Test selecting a context other than current-context."""
        identity = load_local_cluster(kubeconfig_path, context="staging")

        assert identity.host == "https://api.staging.example.com"
        assert identity.ca_data == b""
        assert identity.ca_base64 == ""

    def test_certificate_authority_file(self, tmp_path) -> None:
        """Test reading the CA from a file relative to the kubeconfig."""
        (tmp_path / "ca.crt").write_bytes(CA_PEM)
        path = _write_kubeconfig(
            tmp_path / "config",
            clusters=[
                {
                    "name": "prod-eu",
                    "cluster": {
                        "server": "https://api.prod-eu.example.com:6443",
                        "certificate-authority": "ca.crt",
                    },
                }
            ],
        )

        assert load_local_cluster(path).ca_data == CA_PEM

    def test_missing_file(self, tmp_path) -> None:
        """Test a missing kubeconfig is a KubeconfigError."""
        with pytest.raises(KubeconfigError, match="not found"):
            load_local_cluster(tmp_path / "missing")

    def test_invalid_yaml(self, tmp_path) -> None:
        """Test an unparsable kubeconfig is a KubeconfigError."""
        path = tmp_path / "config"
        path.write_text("clusters: [unclosed")

        with pytest.raises(KubeconfigError):
            load_local_cluster(path)

    def test_unknown_context(self, kubeconfig_path) -> None:
        """Test an unknown context is a KubeconfigError."""
        with pytest.raises(KubeconfigError, match="nope"):
            load_local_cluster(kubeconfig_path, context="nope")

    def test_no_current_context(self, tmp_path) -> None:
        """Test a kubeconfig without current-context is a KubeconfigError."""
        path = _write_kubeconfig(tmp_path / "config", **{"current-context": ""})

        with pytest.raises(KubeconfigError, match="current-context"):
            load_local_cluster(path)

    def test_context_references_unknown_cluster(self, tmp_path) -> None:
        """Test a dangling cluster reference is a KubeconfigError."""
        path = _write_kubeconfig(
            tmp_path / "config",
            contexts=[{"name": "prod-eu-admin", "context": {"cluster": "gone"}}],
        )

        with pytest.raises(KubeconfigError, match="gone"):
            load_local_cluster(path)

    def test_invalid_ca_data(self, tmp_path) -> None:
        """Test undecodable certificate-authority-data is a KubeconfigError."""
        path = _write_kubeconfig(
            tmp_path / "config",
            clusters=[
                {
                    "name": "prod-eu",
                    "cluster": {"server": "https://x", "certificate-authority-data": "!!!"},
                }
            ],
        )

        with pytest.raises(KubeconfigError):
            load_local_cluster(path)


class TestDefaultKubeconfigPath:
    """Tests for default_kubeconfig_path."""

    def test_kubeconfig_env(self, monkeypatch, tmp_path) -> None:
        """Test $KUBECONFIG takes precedence."""
        monkeypatch.setenv("KUBECONFIG", str(tmp_path / "a"))

        assert default_kubeconfig_path() == tmp_path / "a"

    def test_home_fallback(self, monkeypatch) -> None:
        """Test ~/.kube/config is used without $KUBECONFIG."""
        monkeypatch.delenv("KUBECONFIG", raising=False)

        assert default_kubeconfig_path() == Path.home() / ".kube" / "config"
