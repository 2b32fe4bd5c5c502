"""Port for the host environment's view of the acting user."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from course_settings.domain.model import ActorContext


@runtime_checkable
class ActorContextProvider(Protocol):
    """Callable returning the acting user's role and the current instant."""

    def __call__(self) -> ActorContext: ...


__all__ = ["ActorContextProvider"]
