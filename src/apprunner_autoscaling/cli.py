"""Typer CLI for App Runner auto scaling configurations."""

from __future__ import annotations

from pathlib import Path

import structlog
import typer
from botocore.exceptions import BotoCoreError
from rich.console import Console
from rich.table import Table

from apprunner_autoscaling.config.loader import load_platform_config, load_spec
from apprunner_autoscaling.config.models import (
    AutoScalingSpec,
    LogFormat,
    PlatformConfig,
)
from apprunner_autoscaling.deployment import Deployment
from apprunner_autoscaling.errors import AutoScalingError
from apprunner_autoscaling.observability.logging_setup import configure_logging
from apprunner_autoscaling.resources.autoscaling import AppRunnerAutoScaling
from apprunner_autoscaling.resources.client import (
    ControlPlane,
    build_apprunner_client,
)

logger = structlog.get_logger()
console = Console()
app = typer.Typer(
    name="apprunner-autoscaling", help="App Runner auto scaling configurations"
)


def _platform(platform_config: str | None, json_logs: bool) -> PlatformConfig:
    try:
        platform = load_platform_config(
            Path(platform_config) if platform_config else None
        )
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[red]Platform config error:[/red] {exc}")
        raise typer.Exit(1) from exc
    log_format = LogFormat.JSON if json_logs else platform.log_format
    configure_logging(log_format, platform.log_level)
    return platform


def _client(platform: PlatformConfig) -> ControlPlane:
    try:
        return build_apprunner_client(platform.aws)
    except BotoCoreError as exc:
        console.print(f"[red]AWS client error:[/red] {exc}")
        raise typer.Exit(1) from exc


def _spec(spec_path: str) -> AutoScalingSpec:
    path = Path(spec_path)
    if not path.exists():
        console.print(f"[red]Spec file not found: {path}[/red]")
        raise typer.Exit(1)
    try:
        return load_spec(path)
    except ValueError as exc:
        console.print(f"[red]Validation error:[/red] {exc}")
        raise typer.Exit(1) from exc


@app.command()
def validate(
    spec_path: str = typer.Argument(..., help="Path to auto scaling spec YAML"),
) -> None:
    """Validate an auto scaling specification without calling AWS."""
    spec = _spec(spec_path)

    table = Table(title=f"Auto scaling configuration — {spec.name}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in spec.to_request().items():
        table.add_row(key, str(value))

    console.print("[green]Valid[/green]")
    console.print(table)


@app.command()
def create(
    spec_path: str = typer.Argument(..., help="Path to auto scaling spec YAML"),
    platform_config: str | None = typer.Option(
        None, "--platform-config", help="Platform YAML"
    ),
    json_logs: bool = typer.Option(False, "--json-logs", help="Log as JSON"),
) -> None:
    """Create the auto scaling configuration and print its ARN."""
    platform = _platform(platform_config, json_logs)
    spec = _spec(spec_path)

    deployment = Deployment(_client(platform), platform.retry)
    deployment.add(spec.name, spec)
    try:
        handles = deployment.provision()
    except AutoScalingError as exc:
        console.print(f"[red]Create failed:[/red] {exc}")
        raise typer.Exit(1) from exc

    console.print(f"[green]Created:[/green] {handles[spec.name]}", soft_wrap=True)


@app.command()
def delete(
    arn: str = typer.Argument(..., help="AutoScalingConfigurationArn to delete"),
    platform_config: str | None = typer.Option(
        None, "--platform-config", help="Platform YAML"
    ),
    json_logs: bool = typer.Option(False, "--json-logs", help="Log as JSON"),
) -> None:
    """Delete an auto scaling configuration (already deleted counts as success)."""
    platform = _platform(platform_config, json_logs)

    resource = AppRunnerAutoScaling(_client(platform))
    try:
        resource.delete(arn)
    except AutoScalingError as exc:
        console.print(f"[red]Delete failed:[/red] {exc}")
        raise typer.Exit(1) from exc

    console.print(f"[green]Deleted:[/green] {arn}", soft_wrap=True)
