"""Kubernetes Auth Validator.

Reconcile the local Kubernetes cluster against the Kubernetes auth methods registered
on a fleet of secrets-management gateways, and check that those configurations still work.
"""

__version__ = "0.1.0"
__author__ = "Platform Engineering Team"
__license__ = "Apache-2.0"
