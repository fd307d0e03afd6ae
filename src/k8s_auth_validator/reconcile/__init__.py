"""Reconciliation of gateway Kubernetes auth configs with the local cluster."""

from k8s_auth_validator.reconcile.aggregator import AggregationResult, aggregate
from k8s_auth_validator.reconcile.filter import is_eligible, usable_name
from k8s_auth_validator.reconcile.matcher import match
from k8s_auth_validator.reconcile.pipeline import ReconciliationPipeline
from k8s_auth_validator.reconcile.validator import CredentialValidator

__all__ = [
    "AggregationResult",
    "CredentialValidator",
    "ReconciliationPipeline",
    "aggregate",
    "is_eligible",
    "match",
    "usable_name",
]
