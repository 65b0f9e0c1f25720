"""Deployment — ordered creation and reverse-order teardown of lifecycle resources."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

import structlog
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_none,
    wait_random,
)

from apprunner_autoscaling.config.models import AutoScalingSpec, RetryConfig
from apprunner_autoscaling.errors import LifecycleStateError, ProvisioningError
from apprunner_autoscaling.resources.autoscaling import AppRunnerAutoScaling
from apprunner_autoscaling.resources.base import LifecycleResource, LifecycleState
from apprunner_autoscaling.resources.client import ControlPlane

logger = structlog.get_logger()

SpecSource = (
    AutoScalingSpec
    | Mapping[str, Any]
    | Callable[[Mapping[str, str]], AutoScalingSpec | Mapping[str, Any]]
)
ResourceFactory = Callable[[ControlPlane], LifecycleResource]


@dataclass
class _Entry:
    key: str
    spec: SpecSource
    factory: ResourceFactory
    resource: LifecycleResource | None = None


class Deployment:
    """Creates resources in registration order and deletes them in reverse.

    A spec may be a callable receiving the handles created so far, so a later
    resource can embed an earlier one's handle. A failed run deletes whatever
    it had created (best-effort) and re-raises; throttled runs are retried as
    a whole with fresh resource instances.
    """

    def __init__(
        self,
        control_plane: ControlPlane,
        retry_config: RetryConfig | None = None,
    ) -> None:
        self._control_plane = control_plane
        self._retry = retry_config or RetryConfig()
        self._entries: list[_Entry] = []
        self._stranded: list[str] = []

    def add(
        self,
        key: str,
        spec: SpecSource,
        factory: ResourceFactory = AppRunnerAutoScaling,
    ) -> None:
        if any(e.key == key for e in self._entries):
            msg = f"Resource '{key}' is already registered"
            raise ValueError(msg)
        self._entries.append(_Entry(key=key, spec=spec, factory=factory))

    def resource(self, key: str) -> LifecycleResource | None:
        for entry in self._entries:
            if entry.key == key:
                return entry.resource
        msg = f"Unknown resource '{key}'"
        raise KeyError(msg)

    def handles(self) -> dict[str, str]:
        """Handles of resources currently in the Created state."""
        return {
            e.key: e.resource.handle()
            for e in self._entries
            if e.resource is not None and e.resource.state is LifecycleState.CREATED
        }

    def provision(self) -> dict[str, str]:
        """Create every registered resource; return key -> handle."""
        if self.handles():
            msg = "Deployment is already provisioned; tear it down first"
            raise LifecycleStateError(msg)
        retry_cfg = self._retry
        self._stranded = []

        @retry(
            stop=stop_after_attempt(retry_cfg.max_attempts),
            wait=wait_exponential(
                multiplier=retry_cfg.initial_wait_seconds,
                max=retry_cfg.max_wait_seconds,
                exp_base=retry_cfg.multiplier,
            )
            + (wait_random(0, 1) if retry_cfg.jitter else wait_none()),
            retry=retry_if_exception(self._is_retryable),
            reraise=True,
        )
        def _run() -> dict[str, str]:
            return self._provision_once()

        return _run()

    def _provision_once(self) -> dict[str, str]:
        created: list[_Entry] = []
        handles: dict[str, str] = {}
        try:
            for entry in self._entries:
                spec = entry.spec
                if callable(spec):
                    spec = spec(dict(handles))
                entry.resource = entry.factory(self._control_plane)
                handles[entry.key] = entry.resource.create(spec)
                created.append(entry)
                logger.info(
                    "deployment.resource_created",
                    key=entry.key,
                    handle=handles[entry.key],
                )
        except Exception:
            logger.error(
                "deployment.provision_failed",
                rolling_back=True,
                created=[e.key for e in created],
            )
            self._stranded = self._rollback(created)
            if self._stranded:
                logger.error(
                    "deployment.rollback_incomplete", stranded=self._stranded
                )
            raise
        return handles

    def _is_retryable(self, exc: BaseException) -> bool:
        # A retry would replace the resources a failed rollback left behind.
        if self._stranded:
            return False
        return isinstance(exc, ProvisioningError) and exc.retryable

    def _rollback(self, created: list[_Entry]) -> list[str]:
        """Best-effort cleanup of resources created during a failed run.

        Returns the keys of resources that are still live; they stay
        registered so handles() and teardown() can reach them.
        """
        stranded: list[str] = []
        for entry in reversed(created):
            assert entry.resource is not None
            try:
                entry.resource.delete()
                logger.info("deployment.rollback_deleted", key=entry.key)
            except ProvisioningError as exc:
                logger.warning(
                    "deployment.rollback_failed",
                    key=entry.key,
                    error=str(exc),
                )
                stranded.append(entry.key)
        return stranded

    def teardown(self) -> None:
        """Delete created resources in reverse order.

        The first failure aborts teardown: later resources may be depended on
        by the one that could not be removed.
        """
        for entry in reversed(self._entries):
            resource = entry.resource
            if resource is None or resource.state is not LifecycleState.CREATED:
                continue
            resource.delete()
            logger.info("deployment.resource_deleted", key=entry.key)
