"""Exception hierarchy for auto scaling configuration lifecycles."""

from __future__ import annotations

from enum import StrEnum

from botocore.exceptions import ClientError

THROTTLING_ERROR_CODES = frozenset(
    {
        "Throttling",
        "ThrottlingException",
        "TooManyRequestsException",
        "RequestLimitExceeded",
    }
)

NOT_FOUND_ERROR_CODE = "ResourceNotFoundException"


class LifecycleEvent(StrEnum):
    """Provider action a lifecycle transition issues."""

    CREATE = "create"
    DELETE = "delete"


def error_code(exc: BaseException | None) -> str | None:
    """Return the provider error code carried by a botocore ``ClientError``."""
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code")
    return None


class AutoScalingError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(AutoScalingError, ValueError):
    """Raised when a resource specification is malformed.

    Always raised before any control plane call is attempted.
    """


class LifecycleStateError(AutoScalingError):
    """Raised when a lifecycle method is called out of order (e.g. double create)."""


class ProvisioningError(AutoScalingError):
    """Raised when a create or delete action fails at the provider.

    The provider error, when there is one, is kept on ``cause`` and chained
    as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        *,
        event: LifecycleEvent,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.event = event
        self.cause = cause

    @property
    def code(self) -> str | None:
        return error_code(self.cause)

    @property
    def retryable(self) -> bool:
        """True when the provider rejected the call for throttling reasons."""
        return self.code in THROTTLING_ERROR_CODES
