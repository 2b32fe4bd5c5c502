"""Translate Studio payloads to settings entities and back."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from course_settings.domain.kinds import (
    ALLOW_OPTING_OUT_FIELD,
    CREATE_ZENDESK_TICKETS_FIELD,
    ESCALATION_EMAIL_FIELD,
    PROVIDER_FIELD,
)
from course_settings.domain.model import ENABLED_FIELD, SettingsEntity, SettingsMetadata
from course_settings.domain.ports.settings import LoadedSettings

from .schema import (
    ProctoredExamSettingsRequest,
    ProctoredExamSettingsResponse,
    ProctoredExamSettingsUpdate,
)

if TYPE_CHECKING:
    from .schema import CourseAppPayload

# entity field -> wire field of ``proctored_exam_settings``
EXAM_FIELD_MAP: Mapping[str, str] = {
    ENABLED_FIELD: "enable_proctored_exams",
    ALLOW_OPTING_OUT_FIELD: "allow_proctoring_opt_out",
    PROVIDER_FIELD: "proctoring_provider",
    ESCALATION_EMAIL_FIELD: "proctoring_escalation_email",
    CREATE_ZENDESK_TICKETS_FIELD: "create_zendesk_tickets",
}


def parse_exam_settings(payload: ProctoredExamSettingsResponse | object) -> LoadedSettings:
    response = (
        payload
        if isinstance(payload, ProctoredExamSettingsResponse)
        else ProctoredExamSettingsResponse.model_validate(payload)
    )
    settings = response.proctored_exam_settings
    entity = SettingsEntity(
        {name: getattr(settings, wire_name) for name, wire_name in EXAM_FIELD_MAP.items()}
    )
    metadata = SettingsMetadata(
        options={PROVIDER_FIELD: tuple(response.available_proctoring_providers)},
        course_start_date=response.course_start_date,
    )
    return LoadedSettings(entity=entity, metadata=metadata)


def exam_settings_request(fields: Mapping[str, object]) -> dict[str, object]:
    """Request body carrying only the known exam fields present in ``fields``."""

    update = ProctoredExamSettingsUpdate.model_validate(
        {EXAM_FIELD_MAP[name]: value for name, value in fields.items() if name in EXAM_FIELD_MAP}
    )
    request = ProctoredExamSettingsRequest(proctored_exam_settings=update)
    return request.model_dump(exclude_unset=True)


def parse_course_app(
    app: CourseAppPayload,
    *,
    extra_values: Mapping[str, object] | None = None,
) -> LoadedSettings:
    values: dict[str, object] = {ENABLED_FIELD: bool(app.enabled)}
    values.update(extra_values or {})
    links = {
        key: value
        for key, value in app.documentation_links.model_dump().items()
        if isinstance(value, str)
    }
    return LoadedSettings(
        entity=SettingsEntity(values),
        metadata=SettingsMetadata(documentation_links=links),
    )


def advanced_settings_request(fields: Mapping[str, object]) -> dict[str, object]:
    return {name: {"value": value} for name, value in fields.items()}


__all__ = [
    "EXAM_FIELD_MAP",
    "advanced_settings_request",
    "exam_settings_request",
    "parse_course_app",
    "parse_exam_settings",
]
