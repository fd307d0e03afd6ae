"""Tests for console and JSON reporting."""

import json

import pytest
from rich.console import Console

from k8s_auth_validator.core.models import (
    GatewayAuthConfigs,
    GatewayFetchFailure,
    GatewayIdentity,
    MatchResult,
    ReconciliationReport,
    TokenReviewOutcome,
)
from k8s_auth_validator.reporting.reporter import Reporter, report_to_dict


@pytest.fixture
def console() -> Console:
    """Recording console wide enough to avoid wrapping."""
    return Console(record=True, width=200, color_system=None)


@pytest.fixture
def matched_report(local_cluster, running_gateway, matching_config) -> ReconciliationReport:
    """Report with one validated match."""
    return ReconciliationReport(
        local_cluster=local_cluster,
        gateways_listed=2,
        gateways_eligible=1,
        aggregate=[GatewayAuthConfigs(gateway=running_gateway, configs=[matching_config])],
        matches=[
            MatchResult(
                gateway=running_gateway,
                config=matching_config,
                ca_matches=True,
                outcome=TokenReviewOutcome(
                    authenticated=True, username="system:serviceaccount:ns:sa"
                ),
            )
        ],
    )


class TestReporter:
    """Tests for Reporter.render."""

    def test_render_match(self, console, matched_report) -> None:
        """Test a match is rendered with CA and token review results."""
        Reporter(console=console).render(matched_report)
        output = console.export_text()

        assert "prod-eu-admin" in output
        assert "Prod-EU" in output
        assert "k8s-prod-eu" in output
        assert "p-abc123" in output
        assert "matches" in output
        assert "system:serviceaccount:ns:sa" in output
        assert "reviewer.jwt.token" not in output

    def test_render_ca_mismatch_and_invalid_jwt(self, console, matched_report) -> None:
        """Test negative findings are rendered."""
        match = matched_report.matches[0].model_copy(
            update={
                "ca_matches": False,
                "outcome": TokenReviewOutcome(authenticated=False, error="401 Unauthorized"),
            }
        )
        report = matched_report.model_copy(update={"matches": [match]})

        Reporter(console=console).render(report)
        output = console.export_text()

        assert "does NOT match" in output
        assert "not valid: 401 Unauthorized" in output

    def test_render_no_match(self, console, local_cluster) -> None:
        """Test the explicit no-match message."""
        Reporter(console=console).render(ReconciliationReport(local_cluster=local_cluster))

        assert "No Kubernetes auth config found" in console.export_text()

    def test_render_fetch_failure(self, console, local_cluster) -> None:
        """Test fetch failures are shown as warnings."""
        report = ReconciliationReport(
            local_cluster=local_cluster,
            fetch_failures=[
                GatewayFetchFailure(
                    gateway=GatewayIdentity(cluster_name="org/gw-down"), error="connection refused"
                )
            ],
        )

        Reporter(console=console).render(report)

        assert "gw-down: connection refused" in console.export_text()

    def test_verbose_shows_ca(self, console, local_cluster) -> None:
        """Test verbose mode prints the local CA."""
        Reporter(console=console, verbose=True).render(
            ReconciliationReport(local_cluster=local_cluster)
        )

        assert local_cluster.ca_base64 in console.export_text()


class TestReportToDict:
    """Tests for report_to_dict."""

    def test_json_safe_without_secrets(self, matched_report) -> None:
        """Test the dictionary serialises and omits secret fields."""
        data = report_to_dict(matched_report)
        text = json.dumps(data)

        assert data["match_found"] is True
        assert data["matches"][0]["ca_matches"] is True
        assert data["matches"][0]["token_review"]["authenticated"] is True
        assert data["matches"][0]["config"]["name"] == "k8s-prod-eu"
        assert "k8s_token_reviewer_jwt" not in data["matches"][0]["config"]
        assert "reviewer.jwt.token" not in text

    def test_no_match(self, local_cluster) -> None:
        """Test an empty report."""
        data = report_to_dict(ReconciliationReport(local_cluster=local_cluster))

        assert data["match_found"] is False
        assert data["matches"] == []
        assert data["local_cluster"]["host"] == "https://api.prod-eu.example.com:6443"
