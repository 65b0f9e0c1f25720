#!/usr/bin/env python3
"""Runnable demo: create an auto scaling configuration, then tear it down.

Prerequisites:
    AWS credentials for a profile allowed to call apprunner:*AutoScalingConfiguration
    uv run python examples/autoscaling_demo.py
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from apprunner_autoscaling.config.loader import load_platform_config, load_spec
from apprunner_autoscaling.deployment import Deployment
from apprunner_autoscaling.observability.logging_setup import configure_logging
from apprunner_autoscaling.resources.client import build_apprunner_client

HERE = Path(__file__).parent
console = Console()


def main() -> None:
    # 1. Load platform settings + spec
    platform = load_platform_config(HERE / "demo-platform.yaml")
    configure_logging(platform.log_format, platform.log_level)
    spec = load_spec(HERE / "demo-autoscaling.yaml")
    console.print("[bold]Spec loaded[/bold]", spec.name)

    # 2. Create
    deployment = Deployment(build_apprunner_client(platform.aws), platform.retry)
    deployment.add("autoscaling", spec)
    handles = deployment.provision()
    arn = handles["autoscaling"]
    console.print(f"[green]Created:[/green] {arn}", soft_wrap=True)
    console.print(
        "Embed it in the service definition as "
        f"AutoScalingConfigurationArn={arn}",
        soft_wrap=True,
    )

    # 3. Teardown
    input("Press Enter to delete the configuration...")
    deployment.teardown()
    console.print("[green]Deleted[/green]")


if __name__ == "__main__":
    main()
