"""Main CLI entry point for the Kubernetes auth validator."""

from __future__ import annotations

import json

import click
from rich.console import Console

from k8s_auth_validator import __version__
from k8s_auth_validator.core.config import ValidatorConfig
from k8s_auth_validator.core.exceptions import K8sAuthValidatorError, MissingTokenError

console = Console()


def _load_config(config_path: str | None) -> ValidatorConfig:
    if config_path:
        return ValidatorConfig.from_file(config_path)
    return ValidatorConfig()


@click.command()
@click.version_option(version=__version__)
@click.option(
    "-t",
    "--token",
    envvar="AKEYLESS_TOKEN",
    default="",
    help="Access token for the control plane and gateways",
)
@click.option(
    "-u",
    "--api-gateway-url",
    envvar="AKEYLESS_API_GATEWAY_URL",
    help="Control-plane API URL [default: https://api.akeyless.io]",
)
@click.option(
    "-g",
    "--gateway-name-filter",
    envvar="AKEYLESS_GATEWAY_NAME_FILTER",
    help="Only inspect gateways whose name starts with this prefix",
)
@click.option(
    "-v",
    "--verbose",
    envvar="AKEYLESS_VERBOSE",
    is_flag=True,
    help="Show verbose debug information",
)
@click.option("--kubeconfig", type=click.Path(dir_okay=False), help="Path to kubeconfig file")
@click.option("--context", "kube_context", help="Kubeconfig context to use instead of current")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to optional YAML configuration file",
)
@click.option("--output", type=click.Choice(["table", "json"]), default="table")
@click.option(
    "--skip-token-review",
    is_flag=True,
    help="Only match hosts and CA certificates, do not call TokenReview",
)
@click.pass_context
def cli(
    ctx: click.Context,
    token: str,
    api_gateway_url: str | None,
    gateway_name_filter: str | None,
    verbose: bool,
    kubeconfig: str | None,
    kube_context: str | None,
    config_path: str | None,
    output: str,
    skip_token_review: bool,
) -> None:
    """Check which gateways trust the current Kubernetes cluster and whether it still works."""
    from k8s_auth_validator.clients.gateway_client import GatewayClient
    from k8s_auth_validator.clients.token_review_client import TokenReviewClient
    from k8s_auth_validator.reconcile.pipeline import ReconciliationPipeline
    from k8s_auth_validator.reconcile.validator import CredentialValidator
    from k8s_auth_validator.reporting.reporter import Reporter, report_to_dict
    from k8s_auth_validator.utils.kubeconfig import load_local_cluster
    from k8s_auth_validator.utils.logging import get_logger, log_error, setup_logging

    try:
        config = _load_config(config_path).with_overrides(
            api_gateway_url=api_gateway_url,
            gateway_name_filter=gateway_name_filter,
            kubeconfig=kubeconfig,
            context=kube_context,
        )
    except K8sAuthValidatorError as e:
        console.print(f"[red]Error: {e}[/red]")
        ctx.exit(1)

    log_level = "DEBUG" if verbose else config.logging.level
    setup_logging(level=log_level, format=config.logging.format, output=config.logging.output)
    logger = get_logger(__name__)

    try:
        if not token:
            raise MissingTokenError(
                "Access token is not set. Use the -t/--token flag or the AKEYLESS_TOKEN "
                "environment variable"
            )

        local_cluster = load_local_cluster(config.kubeconfig, config.context)

        with GatewayClient(
            api_gateway_url=config.api_gateway_url,
            timeout=config.request_timeout_seconds,
        ) as gateway_client:
            pipeline = ReconciliationPipeline(
                gateway_client=gateway_client,
                validator=CredentialValidator(
                    TokenReviewClient(timeout=config.request_timeout_seconds)
                ),
            )
            report = pipeline.run(
                local_cluster=local_cluster,
                token=token,
                name_filter=config.gateway_name_filter,
                validate_tokens=not skip_token_review,
            )

    except K8sAuthValidatorError as e:
        log_error(logger, e, operation="reconcile")
        console.print(f"[red]Error: {e}[/red]")
        ctx.exit(1)

    if output == "json":
        print(json.dumps(report_to_dict(report), indent=2, default=str))
    else:
        Reporter(console=console, verbose=verbose).render(report)


if __name__ == "__main__":
    cli()
