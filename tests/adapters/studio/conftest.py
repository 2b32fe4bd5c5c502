"""Shared fixtures for Studio adapter tests."""

from __future__ import annotations

import pytest


@pytest.fixture
def exam_payload() -> dict[str, object]:
    return {
        "proctored_exam_settings": {
            "enable_proctored_exams": True,
            "allow_proctoring_opt_out": False,
            "proctoring_provider": "software_secure",
            "proctoring_escalation_email": None,
            "create_zendesk_tickets": True,
        },
        "available_proctoring_providers": ["null", "proctortrack", "software_secure"],
        "course_start_date": "2024-02-01T00:00:00Z",
    }


@pytest.fixture
def course_apps_payload() -> list[dict[str, object]]:
    return [
        {
            "id": "progress",
            "name": "Progress",
            "enabled": True,
            "allows_configuration": True,
            "documentation_links": {"learn_more_configuration": "https://docs.test/progress"},
        },
        {
            "id": "wiki",
            "name": "Wiki",
            "enabled": False,
            "documentation_links": {"learn_more_configuration": ""},
        },
    ]
