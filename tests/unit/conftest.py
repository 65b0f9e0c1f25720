"""Shared fixtures: an in-memory App Runner control plane."""

from __future__ import annotations

import itertools
from typing import Any

import pytest
from botocore.exceptions import ClientError

ARN_PREFIX = "arn:aws:apprunner:us-east-1:123456789012:autoscalingconfiguration"


def client_error(
    code: str, operation: str = "CreateAutoScalingConfiguration"
) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class FakeControlPlane:
    """Keeps auto scaling configurations in a dict keyed by ARN."""

    def __init__(self) -> None:
        self.configs: dict[str, dict[str, Any]] = {}
        self.create_calls: list[dict[str, Any]] = []
        self.delete_calls: list[str] = []
        self.create_failures: list[Exception] = []
        self.delete_failures: list[Exception] = []
        self._ids = itertools.count(1)

    def create_auto_scaling_configuration(self, **kwargs: Any) -> dict[str, Any]:
        self.create_calls.append(kwargs)
        if self.create_failures:
            raise self.create_failures.pop(0)
        name = kwargs["AutoScalingConfigurationName"]
        arn = f"{ARN_PREFIX}/{name}/1/{next(self._ids):08x}"
        self.configs[arn] = kwargs
        return {
            "AutoScalingConfiguration": {
                "AutoScalingConfigurationArn": arn,
                "AutoScalingConfigurationName": name,
                "AutoScalingConfigurationRevision": 1,
                "Status": "ACTIVE",
            }
        }

    def delete_auto_scaling_configuration(self, **kwargs: Any) -> dict[str, Any]:
        arn = kwargs["AutoScalingConfigurationArn"]
        self.delete_calls.append(arn)
        if self.delete_failures:
            raise self.delete_failures.pop(0)
        if arn not in self.configs:
            raise client_error(
                "ResourceNotFoundException", "DeleteAutoScalingConfiguration"
            )
        del self.configs[arn]
        return {"AutoScalingConfiguration": {"AutoScalingConfigurationArn": arn}}


@pytest.fixture
def control_plane() -> FakeControlPlane:
    return FakeControlPlane()
