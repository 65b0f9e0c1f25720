"""Lifecycle-backed App Runner auto scaling configurations."""

from apprunner_autoscaling.errors import (
    AutoScalingError,
    LifecycleStateError,
    ProvisioningError,
    ValidationError,
)
from apprunner_autoscaling.resources.autoscaling import AppRunnerAutoScaling

__all__ = [
    "AppRunnerAutoScaling",
    "AutoScalingError",
    "LifecycleStateError",
    "ProvisioningError",
    "ValidationError",
]
