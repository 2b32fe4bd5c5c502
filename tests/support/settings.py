"""Reusable fakes and builders for settings-session tests."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING

from course_settings.domain.model import ActorContext, SettingsEntity, SettingsMetadata
from course_settings.domain.ports.settings import LoadedSettings

if TYPE_CHECKING:
    from course_settings.domain.model import SettingsRef

BEFORE_START = datetime(2024, 1, 1, 9, 0, 0)
COURSE_START = "2024-02-01T00:00:00Z"
AFTER_START = datetime(2024, 3, 1, 9, 0, 0)


def exam_values(**overrides: object) -> dict[str, object]:
    values: dict[str, object] = {
        "enabled": True,
        "allow_opting_out": False,
        "provider": "software_secure",
        "escalation_email": None,
        "create_zendesk_tickets": True,
    }
    values.update(overrides)
    return values


def exam_metadata(*, course_start_date: str | None = COURSE_START) -> SettingsMetadata:
    return SettingsMetadata(
        options={"provider": ("null", "proctortrack", "software_secure")},
        course_start_date=course_start_date,
    )


def loaded(
    values: Mapping[str, object] | None = None,
    metadata: SettingsMetadata | None = None,
) -> LoadedSettings:
    return LoadedSettings(
        entity=SettingsEntity(values if values is not None else exam_values()),
        metadata=metadata or exam_metadata(),
    )


class FixedActor:
    """Actor context provider with a settable role and instant."""

    def __init__(self, *, is_admin: bool = False, now: datetime = BEFORE_START) -> None:
        self.is_admin = is_admin
        self.now = now

    def __call__(self) -> ActorContext:
        return ActorContext(is_admin=self.is_admin, now=self.now)


class FakeSettingsGateway:
    """In-memory settings owner that records every call.

    Set ``fetch_gate`` / ``save_gate`` to an ``asyncio.Event`` to hold the
    corresponding requests open until the test releases them.
    """

    def __init__(
        self,
        result: LoadedSettings | None = None,
        *,
        fetch_error: Exception | None = None,
        enablement_error: Exception | None = None,
        body_error: Exception | None = None,
    ) -> None:
        self.result = result or loaded()
        self.fields: tuple[str, ...] = ()
        self.fetch_error = fetch_error
        self.enablement_error = enablement_error
        self.body_error = body_error
        self.fetch_gate: asyncio.Event | None = None
        self.save_gate: asyncio.Event | None = None
        self.fetch_calls: list[SettingsRef] = []
        self.enablement_calls: list[bool] = []
        self.body_calls: list[dict[str, object]] = []
        self.events: list[str] = []

    async def fetch_settings(self, ref: SettingsRef) -> LoadedSettings:
        self.fetch_calls.append(ref)
        self.events.append("fetch")
        if self.fetch_gate is not None:
            await self.fetch_gate.wait()
        if self.fetch_error is not None:
            raise self.fetch_error
        return LoadedSettings(
            entity=self.result.entity.snapshot(),
            metadata=self.result.metadata,
        )

    async def save_enablement(self, ref: SettingsRef, enabled: bool) -> None:  # noqa: FBT001
        del ref
        self.enablement_calls.append(enabled)
        self.events.append("enablement:start")
        if self.save_gate is not None:
            await self.save_gate.wait()
        self.events.append("enablement:end")
        if self.enablement_error is not None:
            raise self.enablement_error

    async def save_settings_body(self, ref: SettingsRef, fields: Mapping[str, object]) -> None:
        del ref
        self.body_calls.append(dict(fields))
        self.events.append("body:start")
        if self.save_gate is not None:
            await self.save_gate.wait()
        self.events.append("body:end")
        if self.body_error is not None:
            raise self.body_error
