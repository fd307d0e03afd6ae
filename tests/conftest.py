"""Pytest configuration and shared fixtures."""

import base64
from typing import Any

import pytest

from k8s_auth_validator.core.models import (
    GatewayAuthConfigs,
    GatewayIdentity,
    KubeAuthConfig,
    LocalClusterIdentity,
)

LOCAL_HOST = "https://api.prod-eu.example.com:6443"
LOCAL_CA = b"-----BEGIN CERTIFICATE-----\nMIIBtest\n-----END CERTIFICATE-----\n"
LOCAL_CA_B64 = base64.b64encode(LOCAL_CA).decode("ascii")


@pytest.fixture
def local_cluster() -> LocalClusterIdentity:
    """Provide the local cluster identity used across tests."""
    return LocalClusterIdentity(
        context_name="prod-eu-admin",
        cluster_name="prod-eu",
        namespace="default",
        user="admin",
        host=LOCAL_HOST,
        ca_data=LOCAL_CA,
    )


@pytest.fixture
def running_gateway() -> GatewayIdentity:
    """Provide a running gateway with a URL."""
    return GatewayIdentity(
        cluster_name="acme/gateways/gw-prod-eu",
        display_name="Prod-EU",
        status="Running",
        cluster_url="https://gw-prod-eu.example.com:8000",
    )


@pytest.fixture
def stopped_gateway() -> GatewayIdentity:
    """Provide a gateway that is not running."""
    return GatewayIdentity(
        cluster_name="acme/gateways/gw-legacy",
        display_name="",
        status="Stopped",
        cluster_url="https://gw-legacy.example.com:8000",
    )


@pytest.fixture
def matching_config() -> KubeAuthConfig:
    """Provide an auth config registered for the local cluster."""
    return KubeAuthConfig(
        name="k8s-prod-eu",
        id="kac-1",
        auth_method_access_id="p-abc123",
        k8s_host=LOCAL_HOST,
        k8s_ca_cert=LOCAL_CA_B64,
        k8s_token_reviewer_jwt="reviewer.jwt.token",
    )


@pytest.fixture
def other_config() -> KubeAuthConfig:
    """Provide an auth config registered for a different cluster."""
    return KubeAuthConfig(
        name="k8s-staging",
        id="kac-2",
        auth_method_access_id="p-def456",
        k8s_host="https://api.staging.example.com:6443",
        k8s_ca_cert="c3RhZ2luZw==",
        k8s_token_reviewer_jwt="staging.jwt.token",
    )


@pytest.fixture
def sample_aggregate(
    running_gateway: GatewayIdentity,
    matching_config: KubeAuthConfig,
    other_config: KubeAuthConfig,
) -> list[GatewayAuthConfigs]:
    """Provide an aggregate with one matching and one non-matching config."""
    return [GatewayAuthConfigs(gateway=running_gateway, configs=[other_config, matching_config])]


@pytest.fixture
def sample_directory_payload() -> dict[str, Any]:
    """Sample list-gateways response."""
    return {
        "clusters": [
            {
                "id": 1,
                "cluster_name": "acme/gateways/gw-prod-eu",
                "display_name": "Prod-EU",
                "status": "Running",
                "cluster_url": "https://gw-prod-eu.example.com:8000",
            },
            {
                "id": 2,
                "cluster_name": "acme/gateways/gw-legacy",
                "display_name": "",
                "status": "Stopped",
                "cluster_url": "https://gw-legacy.example.com:8000",
            },
        ]
    }


@pytest.fixture
def sample_auth_configs_payload() -> dict[str, Any]:
    """Sample gateway /config/k8s-auths response."""
    return {
        "k8s_auths": [
            {
                "name": "k8s-prod-eu",
                "id": "kac-1",
                "protection_key": "",
                "auth_method_access_id": "p-abc123",
                "auth_method_prv_key_pem": "private-key",
                "am_token_expiration": 300,
                "k8s_host": LOCAL_HOST,
                "k8s_ca_cert": LOCAL_CA_B64,
                "k8s_token_reviewer_jwt": "reviewer.jwt.token",
                "k8s_issuer": "https://kubernetes.default.svc.cluster.local",
                "k8s_pub_keys_pem": None,
                "disable_iss_validation": True,
                "use_local_ca_jwt": False,
                "cluster_api_type": "native_k8s",
            }
        ]
    }


def pytest_configure(config: Any) -> None:
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
