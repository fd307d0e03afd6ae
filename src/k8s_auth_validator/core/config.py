"""Configuration management for the Kubernetes auth validator."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from k8s_auth_validator.core.exceptions import ConfigurationError

DEFAULT_API_GATEWAY_URL = "https://api.akeyless.io"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "console"
    output: str = "stderr"


class ValidatorConfig(BaseModel):
    """Main validator configuration.

    The access token is deliberately not part of this model; it only comes from
    the command line or the environment.
    """

    api_gateway_url: str = DEFAULT_API_GATEWAY_URL
    gateway_name_filter: str = ""
    request_timeout_seconds: float = Field(default=DEFAULT_REQUEST_TIMEOUT_SECONDS, gt=0)
    kubeconfig: str | None = None
    context: str | None = None
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: str | Path) -> "ValidatorConfig":
        """Load configuration from YAML file.

        Args:
            path: Path to configuration file

        Returns:
            ValidatorConfig instance

        Raises:
            ConfigurationError: If file cannot be loaded or parsed
        """
        config_path = Path(path).expanduser()

        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open() as f:
                data = yaml.safe_load(f) or {}
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Invalid configuration: expected a mapping in {config_path}")

        try:
            return cls(**data)
        except Exception as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    def with_overrides(self, **overrides: Any) -> "ValidatorConfig":
        """Return a copy with non-None overrides applied.

        Args:
            **overrides: Field values from flags or environment

        Returns:
            New ValidatorConfig instance
        """
        updates = {key: value for key, value in overrides.items() if value is not None}
        return self.model_copy(update=updates)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Dictionary representation
        """
        return self.model_dump()
