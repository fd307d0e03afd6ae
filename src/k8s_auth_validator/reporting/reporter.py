"""Console and JSON reporting of reconciliation results."""

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from k8s_auth_validator.core.models import MatchResult, ReconciliationReport
from k8s_auth_validator.reconcile.filter import usable_name

# Fields never included in a report
SECRET_FIELDS = {"auth_method_prv_key_pem", "k8s_token_reviewer_jwt"}


def _token_review_cell(match: MatchResult) -> str:
    outcome = match.outcome
    if outcome is None:
        return "[dim]skipped[/dim]"
    if outcome.authenticated:
        return f"[green]✓ valid ({escape(outcome.username or 'unknown user')})[/green]"
    detail = f": {escape(outcome.error)}" if outcome.error else ""
    return f"[red]✗ not valid{detail}[/red]"


class Reporter:
    """Renders a ReconciliationReport with rich."""

    def __init__(self, console: Console | None = None, verbose: bool = False):
        self.console = console or Console()
        self.verbose = verbose

    def render(self, report: ReconciliationReport) -> None:
        """Print the full report."""
        local = report.local_cluster

        self.console.print("[bold]Local cluster[/bold]")
        self.console.print(f"  Context: {local.context_name}")
        self.console.print(f"  Cluster: {local.cluster_name}")
        self.console.print(f"  Namespace: {local.namespace or '-'}")
        self.console.print(f"  User: {local.user or '-'}")
        self.console.print(f"  Endpoint: {local.host}")
        if self.verbose:
            self.console.print(f"  Certificate authority data: {local.ca_base64}")
        self.console.print()

        self.console.print("[bold]Gateways[/bold]")
        if report.name_filter:
            self.console.print(f"  Name filter: {report.name_filter}")
        self.console.print(f"  Listed: {report.gateways_listed}")
        self.console.print(f"  Eligible: {report.gateways_eligible}")
        self.console.print(f"  With Kubernetes auth configs: {len(report.aggregate)}")
        self.console.print(f"  Auth configs collected: {report.config_count}\n")

        for failure in report.fetch_failures:
            self.console.print(
                f"  [yellow]⚠ Could not fetch auth configs from "
                f"{escape(usable_name(failure.gateway))}: {escape(failure.error)}[/yellow]"
            )
        if report.fetch_failures:
            self.console.print()

        if not report.has_match:
            self.console.print(
                f"[yellow]No Kubernetes auth config found for cluster {local.host}[/yellow]"
            )
            return

        table = Table(title=f"Matching Kubernetes Auth Configs ({len(report.matches)} found)")
        table.add_column("Gateway", style="cyan")
        table.add_column("Auth Config", style="magenta")
        table.add_column("Access ID", style="blue")
        table.add_column("CA Cert")
        table.add_column("Token Reviewer JWT")

        for match in report.matches:
            if match.ca_matches:
                ca_cell = "[green]✓ matches[/green]"
            else:
                ca_cell = "[red]✗ does NOT match[/red]"
            table.add_row(
                escape(usable_name(match.gateway)),
                escape(match.config.name),
                escape(match.config.auth_method_access_id),
                ca_cell,
                _token_review_cell(match),
            )

        self.console.print(table)


def report_to_dict(report: ReconciliationReport) -> dict[str, Any]:
    """Convert a report to a JSON-safe dictionary without secrets.

    Args:
        report: Reconciliation report

    Returns:
        Dictionary representation
    """
    local = report.local_cluster
    return {
        "local_cluster": {
            "context": local.context_name,
            "cluster": local.cluster_name,
            "namespace": local.namespace,
            "user": local.user,
            "host": local.host,
            "ca_base64": local.ca_base64,
        },
        "name_filter": report.name_filter,
        "gateways_listed": report.gateways_listed,
        "gateways_eligible": report.gateways_eligible,
        "gateways_with_configs": [
            {
                "gateway": usable_name(entry.gateway),
                "cluster_url": entry.gateway.cluster_url,
                "configs": [config.name for config in entry.configs],
            }
            for entry in report.aggregate
        ],
        "fetch_failures": [
            {"gateway": usable_name(failure.gateway), "error": failure.error}
            for failure in report.fetch_failures
        ],
        "matches": [
            {
                "gateway": usable_name(m.gateway),
                "cluster_name": m.gateway.cluster_name,
                "config": m.config.model_dump(exclude=SECRET_FIELDS),
                "ca_matches": m.ca_matches,
                "token_review": m.outcome.model_dump() if m.outcome else None,
            }
            for m in report.matches
        ],
        "match_found": report.has_match,
    }
