"""Public interface for the Studio REST adapter."""

from __future__ import annotations

from .client import CourseAppGateway, ExamSettingsGateway
from .schema import CourseAppPayload, ProctoredExamSettingsResponse
from .translator import parse_course_app, parse_exam_settings

__all__ = [
    "CourseAppGateway",
    "CourseAppPayload",
    "ExamSettingsGateway",
    "ProctoredExamSettingsResponse",
    "parse_course_app",
    "parse_exam_settings",
]
