"""App Runner control plane client construction."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import structlog

from apprunner_autoscaling.config.models import AwsConfig

logger = structlog.get_logger()


@runtime_checkable
class ControlPlane(Protocol):
    """The two App Runner actions an auto scaling configuration needs.

    A boto3 ``apprunner`` client satisfies this; so does any test fake.
    """

    def create_auto_scaling_configuration(self, **kwargs: Any) -> dict[str, Any]: ...

    def delete_auto_scaling_configuration(self, **kwargs: Any) -> dict[str, Any]: ...


def build_apprunner_client(config: AwsConfig | None = None) -> ControlPlane:
    """Create a boto3 App Runner client from explicit configuration."""
    import boto3

    config = config or AwsConfig()
    session_kwargs: dict[str, Any] = {"region_name": config.region}
    if config.profile_name is not None:
        session_kwargs["profile_name"] = config.profile_name
    if config.access_key_id is not None and config.secret_access_key is not None:
        session_kwargs["aws_access_key_id"] = config.access_key_id
        session_kwargs["aws_secret_access_key"] = (
            config.secret_access_key.get_secret_value()
        )
        if config.session_token is not None:
            session_kwargs["aws_session_token"] = (
                config.session_token.get_secret_value()
            )

    session = boto3.session.Session(**session_kwargs)
    client = session.client("apprunner", endpoint_url=config.endpoint_url)
    logger.debug(
        "apprunner.client_created",
        region=config.region,
        profile=config.profile_name,
        endpoint_url=config.endpoint_url,
    )
    return client  # type: ignore[no-any-return]
