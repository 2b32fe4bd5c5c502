"""Pydantic models describing the Studio REST payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class StudioBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ProctoredExamSettingsPayload(StudioBaseModel):
    enable_proctored_exams: bool
    allow_proctoring_opt_out: bool = False
    proctoring_provider: str = ""
    proctoring_escalation_email: str | None = None
    create_zendesk_tickets: bool = False


class ProctoredExamSettingsResponse(StudioBaseModel):
    proctored_exam_settings: ProctoredExamSettingsPayload
    available_proctoring_providers: list[str] = Field(default_factory=list)
    course_start_date: str | None = None

    _normalize_start = field_validator("course_start_date", mode="before")(_blank_to_none)


class ProctoredExamSettingsUpdate(StudioBaseModel):
    """Partial update; unset fields are left out of the request body."""

    enable_proctored_exams: bool | None = None
    allow_proctoring_opt_out: bool | None = None
    proctoring_provider: str | None = None
    proctoring_escalation_email: str | None = None
    create_zendesk_tickets: bool | None = None


class ProctoredExamSettingsRequest(StudioBaseModel):
    proctored_exam_settings: ProctoredExamSettingsUpdate


class DocumentationLinks(StudioBaseModel):
    learn_more_configuration: str | None = None
    learn_more_openedx: str | None = None

    _normalize_links = field_validator(
        "learn_more_configuration", "learn_more_openedx", mode="before"
    )(_blank_to_none)


class CourseAppPayload(StudioBaseModel):
    id: str
    name: str = ""
    enabled: bool = False
    description: str | None = None
    allows_configuration: bool = False
    documentation_links: DocumentationLinks = Field(default_factory=DocumentationLinks)


class CourseAppStatusRequest(StudioBaseModel):
    id: str
    enabled: bool


class AdvancedSettingValue(StudioBaseModel):
    value: object = None


class AdvancedSettingsResponse(StudioBaseModel):
    """Advanced settings keyed by setting name; each entry wraps its value."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def setting_values(self) -> dict[str, object]:
        extra = self.model_extra or {}
        result: dict[str, object] = {}
        for name, entry in extra.items():
            if isinstance(entry, dict) and "value" in entry:
                result[name] = AdvancedSettingValue.model_validate(entry).value
        return result


__all__ = [
    "AdvancedSettingValue",
    "AdvancedSettingsResponse",
    "CourseAppPayload",
    "CourseAppStatusRequest",
    "DocumentationLinks",
    "ProctoredExamSettingsPayload",
    "ProctoredExamSettingsRequest",
    "ProctoredExamSettingsResponse",
    "ProctoredExamSettingsUpdate",
]
