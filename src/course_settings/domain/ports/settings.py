"""Ports for reading and writing remote settings entities."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from course_settings.domain.model import SettingsEntity, SettingsMetadata, SettingsRef

FORBIDDEN_STATUS = 403


class SettingsRequestError(RuntimeError):
    """Raised by gateways when a settings request cannot be completed.

    ``status_code`` carries the HTTP-like status of the failed response, or
    ``None`` for network errors and malformed payloads.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_permission_denied(self) -> bool:
        return self.status_code == FORBIDDEN_STATUS


@dataclass(slots=True)
class LoadedSettings:
    """Entity and metadata returned together by a single fetch."""

    entity: SettingsEntity
    metadata: SettingsMetadata


type SettingsFetcher = Callable[[SettingsRef], Awaitable[LoadedSettings]]
type EnablementSaver = Callable[[SettingsRef, bool], Awaitable[None]]
type SettingsBodySaver = Callable[[SettingsRef, Mapping[str, object]], Awaitable[None]]


@runtime_checkable
class SettingsGateway(Protocol):
    """Remote owner of a settings entity and its enablement status."""

    async def fetch_settings(self, ref: SettingsRef) -> LoadedSettings: ...

    async def save_enablement(self, ref: SettingsRef, enabled: bool) -> None: ...  # noqa: FBT001


@runtime_checkable
class SettingsBodyGateway(SettingsGateway, Protocol):
    """Gateway that also stores the fields beyond ``enabled``."""

    async def save_settings_body(self, ref: SettingsRef, fields: Mapping[str, object]) -> None: ...


__all__ = [
    "FORBIDDEN_STATUS",
    "EnablementSaver",
    "LoadedSettings",
    "SettingsBodyGateway",
    "SettingsBodySaver",
    "SettingsFetcher",
    "SettingsGateway",
    "SettingsRequestError",
]
