"""AppRunnerAutoScaling — an auto scaling configuration with a create/delete lifecycle."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from apprunner_autoscaling.config.models import AutoScalingSpec
from apprunner_autoscaling.errors import (
    NOT_FOUND_ERROR_CODE,
    LifecycleEvent,
    LifecycleStateError,
    ProvisioningError,
    error_code,
)
from apprunner_autoscaling.resources.base import LifecycleState
from apprunner_autoscaling.resources.client import ControlPlane

logger = structlog.get_logger()


class AppRunnerAutoScaling:
    """Presents CreateAutoScalingConfiguration / DeleteAutoScalingConfiguration
    as one resource whose identity is the returned ARN.

    The control plane is passed in explicitly so that credentials are resolved
    by the caller and tests can substitute a fake with the same two methods.
    Calls are blocking and never retried here; a whole-run retry belongs to
    :class:`~apprunner_autoscaling.deployment.Deployment`.
    """

    def __init__(self, control_plane: ControlPlane) -> None:
        self._control_plane = control_plane
        self._state = LifecycleState.UNCREATED
        self._handle: str | None = None
        self._spec: AutoScalingSpec | None = None

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def spec(self) -> AutoScalingSpec | None:
        """The specification submitted to create(), if any."""
        return self._spec

    def handle(self) -> str:
        """Return the configuration ARN for embedding in dependent resources."""
        if not self._handle:
            msg = "Auto scaling configuration has not been created"
            raise ProvisioningError(msg, event=LifecycleEvent.CREATE)
        return self._handle

    def create(self, spec: AutoScalingSpec | Mapping[str, Any]) -> str:
        """Create the configuration and store its ARN.

        Raises ``ValidationError`` before any call for a malformed spec, and
        ``LifecycleStateError`` if this instance was already created.
        """
        if not isinstance(spec, AutoScalingSpec):
            spec = AutoScalingSpec.from_mapping(spec)
        if self._state is not LifecycleState.UNCREATED:
            msg = (
                f"Cannot create auto scaling configuration '{spec.name}': "
                f"resource is already {self._state}"
            )
            raise LifecycleStateError(msg)

        try:
            response = self._control_plane.create_auto_scaling_configuration(
                **spec.to_request()
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error(
                "autoscaling.create_failed",
                name=spec.name,
                code=error_code(exc),
                error=str(exc),
            )
            msg = f"Failed to create auto scaling configuration '{spec.name}': {exc}"
            raise ProvisioningError(
                msg, event=LifecycleEvent.CREATE, cause=exc
            ) from exc

        arn = _extract_arn(response)
        if not arn:
            msg = (
                f"Create response for '{spec.name}' has no "
                "AutoScalingConfiguration.AutoScalingConfigurationArn"
            )
            raise ProvisioningError(msg, event=LifecycleEvent.CREATE)

        self._spec = spec
        self._handle = arn
        self._state = LifecycleState.CREATED
        logger.info("autoscaling.created", name=spec.name, arn=arn)
        return arn

    def delete(self, handle: str | None = None) -> None:
        """Delete the configuration addressed by *handle* (default: the stored one).

        A ``ResourceNotFoundException`` counts as success so teardown can be
        repeated. Passing an explicit handle to a fresh instance lets a later
        run clean up a configuration an aborted run left behind.
        """
        if handle and self._handle and handle != self._handle:
            msg = (
                f"Refusing to delete '{handle}': this resource owns '{self._handle}'"
            )
            raise ProvisioningError(msg, event=LifecycleEvent.DELETE)
        target = handle or self._handle
        if not target:
            msg = "Cannot delete auto scaling configuration: no handle to delete"
            raise ProvisioningError(msg, event=LifecycleEvent.DELETE)

        try:
            self._control_plane.delete_auto_scaling_configuration(
                AutoScalingConfigurationArn=target
            )
            logger.info("autoscaling.deleted", arn=target)
        except (ClientError, BotoCoreError) as exc:
            if error_code(exc) != NOT_FOUND_ERROR_CODE:
                logger.error(
                    "autoscaling.delete_failed",
                    arn=target,
                    code=error_code(exc),
                    error=str(exc),
                )
                msg = f"Failed to delete auto scaling configuration '{target}': {exc}"
                raise ProvisioningError(
                    msg, event=LifecycleEvent.DELETE, cause=exc
                ) from exc
            logger.info("autoscaling.delete_not_found", arn=target)

        self._handle = target
        self._state = LifecycleState.DELETED


def _extract_arn(response: Any) -> str | None:
    if not isinstance(response, Mapping):
        return None
    config = response.get("AutoScalingConfiguration")
    if not isinstance(config, Mapping):
        return None
    arn = config.get("AutoScalingConfigurationArn")
    return arn if isinstance(arn, str) else None
