"""Core data models for the Kubernetes auth validator."""

import base64
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


def _without_nulls(data: Any) -> Any:
    if isinstance(data, dict):
        return {key: value for key, value in data.items() if value is not None}
    return data


class GatewayStatus(str, Enum):
    """Gateway cluster operational status."""

    RUNNING = "Running"


class GatewayIdentity(BaseModel):
    """One gateway cluster entry from the control-plane directory.

    The control plane sends snake_case keys; the camelCase aliases are accepted too.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    cluster_name: str = Field(
        default="", validation_alias=AliasChoices("cluster_name", "clusterName")
    )
    display_name: str | None = Field(
        default=None, validation_alias=AliasChoices("display_name", "displayName")
    )
    status: str | None = None
    cluster_url: str | None = Field(
        default=None, validation_alias=AliasChoices("cluster_url", "clusterUrl")
    )
    id: int | str | None = None

    @model_validator(mode="before")
    @classmethod
    def drop_null_fields(cls, data: Any) -> Any:
        """Treat explicit nulls from the directory as unset fields."""
        return _without_nulls(data)

    @property
    def is_running(self) -> bool:
        """Whether the directory reports this gateway as running."""
        return self.status == GatewayStatus.RUNNING.value


class KubeAuthConfig(BaseModel):
    """Kubernetes auth method configuration registered on a gateway."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = ""
    id: str = ""
    protection_key: str = ""
    auth_method_access_id: str = ""
    auth_method_prv_key_pem: str = Field(default="", repr=False)
    am_token_expiration: int = 0
    k8s_host: str = ""
    k8s_ca_cert: str = ""
    k8s_token_reviewer_jwt: str = Field(default="", repr=False)
    k8s_issuer: str = ""
    k8s_pub_keys_pem: str = ""
    disable_iss_validation: bool = False
    use_local_ca_jwt: bool = False
    cluster_api_type: str = ""

    @model_validator(mode="before")
    @classmethod
    def drop_null_fields(cls, data: Any) -> Any:
        """Treat explicit nulls from the gateway as unset fields."""
        return _without_nulls(data)


class GatewayAuthConfigs(BaseModel):
    """A gateway together with the Kubernetes auth configs it holds."""

    model_config = ConfigDict(frozen=True)

    gateway: GatewayIdentity
    configs: list[KubeAuthConfig] = Field(default_factory=list)


class FetchStatus(str, Enum):
    """Outcome of fetching one gateway's auth configs."""

    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


class FetchResult(BaseModel):
    """Tagged result of a single gateway auth config fetch."""

    model_config = ConfigDict(frozen=True)

    status: FetchStatus
    configs: list[KubeAuthConfig] = Field(default_factory=list)
    error: str | None = None

    @classmethod
    def from_configs(cls, configs: list[KubeAuthConfig]) -> "FetchResult":
        """Build an OK or EMPTY result from parsed configs."""
        if configs:
            return cls(status=FetchStatus.OK, configs=configs)
        return cls(status=FetchStatus.EMPTY)

    @classmethod
    def failed(cls, error: str) -> "FetchResult":
        """Build a FAILED result carrying the error detail."""
        return cls(status=FetchStatus.FAILED, error=error)


class LocalClusterIdentity(BaseModel):
    """Identity of the cluster selected by the local kubeconfig."""

    model_config = ConfigDict(frozen=True)

    context_name: str
    cluster_name: str = ""
    namespace: str | None = None
    user: str | None = None
    host: str
    ca_data: bytes = Field(default=b"", repr=False)

    @property
    def ca_base64(self) -> str:
        """Standard base64 encoding of the CA data, as gateways record it."""
        return base64.b64encode(self.ca_data).decode("ascii")


class TokenReviewOutcome(BaseModel):
    """Result of exercising a reviewer JWT against a cluster's TokenReview API."""

    authenticated: bool = False
    username: str | None = None
    uid: str | None = None
    groups: list[str] = Field(default_factory=list)
    audiences: list[str] = Field(default_factory=list)
    error: str | None = None


class MatchResult(BaseModel):
    """Auth config whose recorded host matches the local cluster."""

    gateway: GatewayIdentity
    config: KubeAuthConfig
    ca_matches: bool
    outcome: TokenReviewOutcome | None = None


class GatewayFetchFailure(BaseModel):
    """Gateway whose auth configs could not be collected."""

    gateway: GatewayIdentity
    error: str


class ReconciliationReport(BaseModel):
    """Everything one reconciliation run found."""

    local_cluster: LocalClusterIdentity
    name_filter: str = ""
    gateways_listed: int = 0
    gateways_eligible: int = 0
    aggregate: list[GatewayAuthConfigs] = Field(default_factory=list)
    fetch_failures: list[GatewayFetchFailure] = Field(default_factory=list)
    matches: list[MatchResult] = Field(default_factory=list)

    @property
    def has_match(self) -> bool:
        """Whether any gateway holds an auth config for the local cluster."""
        return len(self.matches) > 0

    @property
    def config_count(self) -> int:
        """Total number of auth configs collected across gateways."""
        return sum(len(entry.configs) for entry in self.aggregate)
