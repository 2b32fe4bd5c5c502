"""Actor context supplied by the host environment."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol

from course_settings.domain.model import ActorContext

if TYPE_CHECKING:
    from course_settings.domain.ports.actor import ActorContextProvider


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class StaticActorContext:
    """Fixed role, wall-clock instant read on every call."""

    is_admin: bool = False
    clock: Clock = field(default=_utcnow)

    def __call__(self) -> ActorContext:
        return ActorContext(is_admin=self.is_admin, now=self.clock())


if TYPE_CHECKING:
    _actor_check: ActorContextProvider = StaticActorContext()


__all__ = ["Clock", "StaticActorContext"]
