"""Studio REST API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_flag, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

STUDIO_TIMEOUT_SECONDS = 15.0


@dataclass(frozen=True)
class StudioConfig:
    """Holds the Studio endpoint, credentials and actor role."""

    base_url: str
    access_token: str
    is_admin: bool
    resilience: ResilienceConfig


def get_studio_config(*, resilience: ResilienceConfig | None = None) -> StudioConfig:
    values = require_env_vars(("STUDIO_BASE_URL", "STUDIO_ACCESS_TOKEN"))
    base_url = values["STUDIO_BASE_URL"].rstrip("/")
    access_token = values["STUDIO_ACCESS_TOKEN"]
    return StudioConfig(
        base_url=base_url,
        access_token=access_token,
        is_admin=env_flag("STUDIO_IS_ADMIN"),
        resilience=resilience
        or ResilienceConfig(
            name="studio",
            base_url=base_url,
            timeout_seconds=STUDIO_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            default_headers={
                "Authorization": f"JWT {access_token}",
                "Accept": "application/json",
            },
        ),
    )
