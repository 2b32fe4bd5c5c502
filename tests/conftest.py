from __future__ import annotations

import pytest

from course_settings.config.http_resilience import ResilienceConfig
from course_settings.config.studio import StudioConfig

STUDIO_BASE_URL = "http://studio.test"


@pytest.fixture
def studio_config() -> StudioConfig:
    return StudioConfig(
        base_url=STUDIO_BASE_URL,
        access_token="token",
        is_admin=False,
        resilience=ResilienceConfig(name="studio", base_url=STUDIO_BASE_URL),
    )
