"""LifecycleResource protocol — create/delete resources with a stable handle."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Protocol, runtime_checkable


class LifecycleState(StrEnum):
    """Uncreated -> Created -> Deleted. There is no way back to Created."""

    UNCREATED = "uncreated"
    CREATED = "created"
    DELETED = "deleted"


@runtime_checkable
class LifecycleResource(Protocol):
    """An external resource created once and deleted once, addressed by its handle."""

    @property
    def state(self) -> LifecycleState: ...

    def create(self, spec: Any) -> str:
        """Issue the creation action and return the resulting handle."""
        ...

    def delete(self, handle: str | None = None) -> None:
        """Issue the deletion action for the handle; "not found" is success."""
        ...

    def handle(self) -> str:
        """Return the handle stored by create()."""
        ...
