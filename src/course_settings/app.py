"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from course_settings.adapters.actor import StaticActorContext
from course_settings.adapters.studio import CourseAppGateway, ExamSettingsGateway
from course_settings.config import get_studio_config
from course_settings.domain.kinds import EXAM_SETTINGS, app_settings_kind
from course_settings.domain.model import LoadState, SaveState, SettingsRef
from course_settings.domain.session import SettingsSession

if TYPE_CHECKING:
    from course_settings.config import StudioConfig
    from course_settings.domain.model import FieldLockTable, ValidationResult
    from course_settings.domain.ports import ActorContextProvider
    from course_settings.domain.validation import FieldRule

log = getLogger(__name__)


def open_exam_settings(
    course_id: str,
    *,
    config: StudioConfig | None = None,
    gateway: ExamSettingsGateway | None = None,
    actor: ActorContextProvider | None = None,
) -> SettingsSession:
    """Build an unloaded session for a course's proctored exam settings."""

    effective_config = config or (gateway.config if gateway else get_studio_config())
    effective_gateway = gateway or ExamSettingsGateway(config=effective_config)
    return SettingsSession(
        SettingsRef(course_id=course_id),
        kind=EXAM_SETTINGS,
        gateway=effective_gateway,
        actor=actor or StaticActorContext(is_admin=effective_config.is_admin),
        save_body=effective_gateway.save_settings_body,
    )


def open_app_settings(
    course_id: str,
    app_id: str,
    *,
    fields: tuple[str, ...] = (),
    extra_rules: tuple[FieldRule, ...] = (),
    config: StudioConfig | None = None,
    gateway: CourseAppGateway | None = None,
    actor: ActorContextProvider | None = None,
) -> SettingsSession:
    """Build an unloaded session for one course app.

    ``fields`` lists the app's advanced settings; with none, saving only toggles
    the app's enabled status.
    """

    effective_config = config or (gateway.config if gateway else get_studio_config())
    effective_gateway = gateway or CourseAppGateway(config=effective_config, fields=fields)
    return SettingsSession(
        SettingsRef(course_id=course_id, app_id=app_id),
        kind=app_settings_kind(app_id, extra_rules=extra_rules),
        gateway=effective_gateway,
        actor=actor or StaticActorContext(is_admin=effective_config.is_admin),
        save_body=effective_gateway.save_settings_body if effective_gateway.fields else None,
    )


@dataclass(slots=True)
class SettingsReport:
    """Snapshot of a session suitable for printing."""

    load_state: LoadState
    save_state: SaveState = SaveState.IDLE
    values: dict[str, object] = field(default_factory=dict)
    locks: FieldLockTable = field(default_factory=dict)
    validation: ValidationResult = field(default_factory=dict)
    status_code: int | None = None

    @property
    def ok(self) -> bool:
        return self.load_state is LoadState.LOADED and self.save_state in {
            SaveState.IDLE,
            SaveState.SUCCESSFUL,
        }


def _report(
    session: SettingsSession,
    *,
    save_state: SaveState,
    status_code: int | None,
) -> SettingsReport:
    return SettingsReport(
        load_state=session.load_state,
        save_state=save_state,
        values=session.values(),
        locks=session.lock_table(),
        validation=session.validation,
        status_code=status_code,
    )


async def show_settings(session: SettingsSession) -> SettingsReport:
    """Load ``session`` and describe what was loaded."""

    outcome = await session.load()
    report = _report(session, save_state=session.save_state, status_code=outcome.status_code)
    session.on_close()
    return report


async def update_settings(
    session: SettingsSession,
    changes: Mapping[str, object],
) -> SettingsReport:
    """Load ``session``, apply ``changes`` as field edits and submit them."""

    outcome = await session.load()
    if outcome.state is not LoadState.LOADED:
        report = _report(session, save_state=session.save_state, status_code=outcome.status_code)
        session.on_close()
        return report

    for name, value in changes.items():
        session.on_field_change(name, value)
        if session.value(name) != value:
            log.warning("Change of %s to %r was not applied (field is locked)", name, value)

    saved = await session.on_submit()
    log.info("Update of %s finished with save state %s", session.ref, saved.state)
    report = _report(session, save_state=session.save_state, status_code=saved.status_code)
    session.on_close()
    return report


__all__ = [
    "SettingsReport",
    "open_app_settings",
    "open_exam_settings",
    "show_settings",
    "update_settings",
]
