"""Pydantic models for auto scaling specifications and platform settings."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Annotated, Any, Self

import pydantic
from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    SecretStr,
    field_validator,
    model_validator,
)

from apprunner_autoscaling.errors import ValidationError

# App Runner caps MaxConcurrency at 200 requests per instance.
MAX_CONCURRENCY_LIMIT = 200

AutoScalingName = Annotated[str, Field(pattern=r"^[A-Za-z0-9][A-Za-z0-9_-]{3,31}$")]


class AutoScalingSpec(BaseModel, frozen=True, extra="forbid"):
    """Desired state of an App Runner auto scaling configuration.

    Field names follow Python conventions; the provider's own request names
    (``AutoScalingConfigurationName``, ``MinSize``, ``MaxSize``,
    ``MaxConcurrency``, ``Tags``) are accepted as aliases so a request body
    can be validated as-is.
    """

    name: AutoScalingName = Field(
        validation_alias=AliasChoices("name", "AutoScalingConfigurationName"),
    )
    min_size: int = Field(
        default=1, ge=1, validation_alias=AliasChoices("min_size", "MinSize")
    )
    max_size: int = Field(
        default=25, ge=1, validation_alias=AliasChoices("max_size", "MaxSize")
    )
    max_concurrency: int = Field(
        default=100,
        gt=0,
        le=MAX_CONCURRENCY_LIMIT,
        validation_alias=AliasChoices("max_concurrency", "MaxConcurrency"),
    )
    tags: dict[str, str] = Field(
        default_factory=dict, validation_alias=AliasChoices("tags", "Tags")
    )

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v: Any) -> Any:
        """Accept the provider's ``[{"Key": ..., "Value": ...}]`` tag list."""
        if isinstance(v, list):
            try:
                return {item["Key"]: item["Value"] for item in v}
            except (KeyError, TypeError) as exc:
                msg = "tags given as a list must contain {'Key', 'Value'} items"
                raise ValueError(msg) from exc
        return v

    @model_validator(mode="after")
    def check_size_bounds(self) -> Self:
        if self.max_size < self.min_size:
            msg = (
                f"max_size ({self.max_size}) must be greater than or equal to "
                f"min_size ({self.min_size})"
            )
            raise ValueError(msg)
        return self

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> AutoScalingSpec:
        """Validate a plain mapping, raising the package's ``ValidationError``."""
        try:
            return cls.model_validate(dict(data))
        except pydantic.ValidationError as exc:
            msg = f"Invalid auto scaling specification:\n{exc}"
            raise ValidationError(msg) from exc

    def to_request(self) -> dict[str, Any]:
        """Build the ``CreateAutoScalingConfiguration`` request parameters."""
        request: dict[str, Any] = {
            "AutoScalingConfigurationName": self.name,
            "MinSize": self.min_size,
            "MaxSize": self.max_size,
            "MaxConcurrency": self.max_concurrency,
        }
        if self.tags:
            request["Tags"] = [
                {"Key": key, "Value": value} for key, value in self.tags.items()
            ]
        return request


class AwsConfig(BaseModel):
    """Explicit credentials and endpoint for the App Runner control plane.

    Leave the key fields unset to use the named profile (or the default
    credential chain when ``profile_name`` is also unset).
    """

    region: str = "us-east-1"
    profile_name: str | None = None
    endpoint_url: str | None = None
    access_key_id: str | None = None
    secret_access_key: SecretStr | None = None
    session_token: SecretStr | None = None

    @model_validator(mode="after")
    def check_static_credentials(self) -> Self:
        """Static credentials come as a key pair or not at all."""
        if (self.access_key_id is None) != (self.secret_access_key is None):
            msg = "access_key_id and secret_access_key must be set together"
            raise ValueError(msg)
        if self.session_token is not None and self.access_key_id is None:
            msg = "session_token requires access_key_id and secret_access_key"
            raise ValueError(msg)
        return self


class RetryConfig(BaseModel):
    """Retry / backoff for whole provisioning runs."""

    max_attempts: int = Field(default=3, ge=1)
    initial_wait_seconds: float = Field(default=1.0, gt=0)
    max_wait_seconds: float = Field(default=30.0, gt=0)
    multiplier: float = Field(default=2.0, ge=1.0)
    jitter: bool = True


class LogFormat(StrEnum):
    """Rendering of structured log events."""

    CONSOLE = "console"
    JSON = "json"


class PlatformConfig(BaseModel):
    """Control plane access, retry policy, and logging."""

    aws: AwsConfig = AwsConfig()
    retry: RetryConfig = RetryConfig()
    log_format: LogFormat = LogFormat.CONSOLE
    log_level: str = "info"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.lower()
        if level not in {"debug", "info", "warning", "error", "critical"}:
            msg = f"Unknown log level '{v}'"
            raise ValueError(msg)
        return level
