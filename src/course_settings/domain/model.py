"""Core value types for a settings editing session."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

ENABLED_FIELD = "enabled"

type FieldKey = str | tuple[str, object]
type ValidationResult = dict[str, str]
type FieldLockTable = dict[FieldKey, bool]


class LoadState(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    CONNECTION_FAILED = "connection_failed"
    PERMISSION_DENIED = "permission_denied"


class SaveState(StrEnum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    SUCCESSFUL = "successful"
    FAILED = "failed"


class ViewMode(StrEnum):
    SPINNER = "spinner"
    FORM = "form"
    CONNECTION_ERROR = "connection_error"
    PERMISSION_ERROR = "permission_error"


@dataclass(frozen=True, slots=True)
class SettingsRef:
    """Address of a settings entity: a course, optionally narrowed to one course app."""

    course_id: str
    app_id: str | None = None

    def __str__(self) -> str:
        if self.app_id is None:
            return self.course_id
        return f"{self.course_id}/{self.app_id}"


class SettingsEntity:
    """Mutable field map with a distinguished boolean ``enabled`` field.

    Values are changed only through :meth:`set`; callers that need a stable
    view take a :meth:`snapshot`.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, object] | None = None) -> None:
        self._values: dict[str, object] = dict(values or {})

    @property
    def enabled(self) -> bool:
        return bool(self._values.get(ENABLED_FIELD, False))

    def get(self, name: str, default: object = None) -> object:
        return self._values.get(name, default)

    def set(self, name: str, value: object) -> None:
        self._values[name] = value

    def field_names(self) -> tuple[str, ...]:
        return tuple(self._values)

    def as_dict(self) -> dict[str, object]:
        return dict(self._values)

    def body(self) -> dict[str, object]:
        """Every field except ``enabled``."""

        return {name: value for name, value in self._values.items() if name != ENABLED_FIELD}

    def snapshot(self) -> SettingsEntity:
        return SettingsEntity(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SettingsEntity):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"SettingsEntity({self._values!r})"


@dataclass(frozen=True, slots=True)
class SettingsMetadata:
    """Read-only context delivered alongside the entity."""

    options: Mapping[str, tuple[object, ...]] = field(default_factory=dict)
    course_start_date: str | None = None
    documentation_links: Mapping[str, str] = field(default_factory=dict)

    def options_for(self, name: str) -> tuple[object, ...]:
        return tuple(self.options.get(name, ()))


@dataclass(frozen=True, slots=True)
class ActorContext:
    is_admin: bool
    now: datetime


@dataclass(frozen=True, slots=True)
class FieldOption:
    value: object
    label: str
    disabled: bool = False


class Generation:
    """Monotonic session counter used to discard results of superseded sessions."""

    __slots__ = ("_value",)

    def __init__(self) -> None:
        self._value = 0

    @property
    def current(self) -> int:
        return self._value

    def advance(self) -> int:
        self._value += 1
        return self._value

    def is_current(self, token: int) -> bool:
        return token == self._value


__all__ = [
    "ENABLED_FIELD",
    "ActorContext",
    "FieldKey",
    "FieldLockTable",
    "FieldOption",
    "Generation",
    "LoadState",
    "SaveState",
    "SettingsEntity",
    "SettingsMetadata",
    "SettingsRef",
    "ValidationResult",
    "ViewMode",
]
