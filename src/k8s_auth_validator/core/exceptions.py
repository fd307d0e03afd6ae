"""Custom exceptions for the Kubernetes auth validator."""


class K8sAuthValidatorError(Exception):
    """Base exception for all validator errors."""


class ConfigurationError(K8sAuthValidatorError):
    """Configuration-related errors."""


class MissingTokenError(K8sAuthValidatorError):
    """No access token was supplied for the control plane."""


class KubeconfigError(K8sAuthValidatorError):
    """Local kubeconfig could not be read or resolved."""


class DirectoryUnavailableError(K8sAuthValidatorError):
    """Gateway directory could not be listed from the control plane."""


class GatewayFetchError(K8sAuthValidatorError):
    """Kubernetes auth configs could not be fetched from one gateway."""


class TokenReviewError(K8sAuthValidatorError):
    """TokenReview call against a cluster failed."""
