"""HTTP gateways for the Studio settings endpoints."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import TypeAdapter, ValidationError

from course_settings.adapters.http_resilience import ResilienceConfig, ResilientClient
from course_settings.domain.ports.settings import SettingsRequestError

from .schema import AdvancedSettingsResponse, CourseAppPayload, CourseAppStatusRequest
from .translator import (
    advanced_settings_request,
    exam_settings_request,
    parse_course_app,
    parse_exam_settings,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from course_settings.config.studio import StudioConfig
    from course_settings.domain.model import SettingsRef
    from course_settings.domain.ports.settings import LoadedSettings, SettingsBodyGateway

log = getLogger(__name__)

EXAM_SETTINGS_PATH = "/api/contentstore/v1/proctored_exam_settings/{course_id}"
COURSE_APPS_PATH = "/api/course_apps/v1/apps/{course_id}"
ADVANCED_SETTINGS_PATH = "/api/contentstore/v0/advanced_settings/{course_id}"

_COURSE_APPS = TypeAdapter(list[CourseAppPayload])


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


async def _send_json(
    client: ResilientClient,
    method: str,
    url: str,
    *,
    body: Mapping[str, object] | list[object] | None = None,
) -> object:
    """Perform one request and return its decoded JSON, or raise ``SettingsRequestError``."""

    try:
        if body is None:
            response = await client.request(method, url)
        else:
            response = await client.request(method, url, json=body)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        log.error(f"Studio {method} {url} returned HTTP {status}")
        raise SettingsRequestError(
            f"Studio request failed with HTTP {status}", status_code=status
        ) from exc
    except httpx.HTTPError as exc:
        log.error(f"Studio {method} {url} failed: {exc}")
        raise SettingsRequestError(f"Studio request failed: {exc}") from exc

    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as exc:
        raise SettingsRequestError("Studio returned a non-JSON payload") from exc


@dataclass(slots=True)
class ExamSettingsGateway:
    """Proctored exam settings; ``enabled`` maps to ``enable_proctored_exams``."""

    config: StudioConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def _url(self, ref: SettingsRef) -> str:
        return self.config.base_url + EXAM_SETTINGS_PATH.format(course_id=ref.course_id)

    async def fetch_settings(self, ref: SettingsRef) -> LoadedSettings:
        async with self.client_factory(self.config.resilience) as client:
            payload = await _send_json(client, "GET", self._url(ref))
        try:
            return parse_exam_settings(payload)
        except ValidationError as exc:
            raise SettingsRequestError("Unexpected proctored exam settings payload") from exc

    async def save_enablement(self, ref: SettingsRef, enabled: bool) -> None:  # noqa: FBT001
        await self._post(ref, {"enabled": enabled})

    async def save_settings_body(self, ref: SettingsRef, fields: Mapping[str, object]) -> None:
        await self._post(ref, fields)

    async def _post(self, ref: SettingsRef, fields: Mapping[str, object]) -> None:
        body = exam_settings_request(fields)
        async with self.client_factory(self.config.resilience) as client:
            await _send_json(client, "POST", self._url(ref), body=body)


@dataclass(slots=True)
class CourseAppGateway:
    """One course app's status plus optional app-specific advanced settings.

    ``fields`` names the advanced settings that make up the app's settings
    body; an app without such fields only toggles its status.
    """

    config: StudioConfig
    fields: tuple[str, ...] = ()
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def _apps_url(self, ref: SettingsRef) -> str:
        return self.config.base_url + COURSE_APPS_PATH.format(course_id=ref.course_id)

    def _advanced_url(self, ref: SettingsRef) -> str:
        return self.config.base_url + ADVANCED_SETTINGS_PATH.format(course_id=ref.course_id)

    async def fetch_settings(self, ref: SettingsRef) -> LoadedSettings:
        if ref.app_id is None:
            raise SettingsRequestError("Course app settings need an app id")
        async with self.client_factory(self.config.resilience) as client:
            apps_payload = await _send_json(client, "GET", self._apps_url(ref))
            advanced_payload = (
                await _send_json(client, "GET", self._advanced_url(ref)) if self.fields else None
            )
        try:
            apps = _COURSE_APPS.validate_python(apps_payload)
            advanced = (
                AdvancedSettingsResponse.model_validate(advanced_payload).setting_values()
                if advanced_payload is not None
                else {}
            )
        except ValidationError as exc:
            raise SettingsRequestError("Unexpected course apps payload") from exc

        app = next((candidate for candidate in apps if candidate.id == ref.app_id), None)
        if app is None:
            raise SettingsRequestError(f"Course app {ref.app_id!r} not found", status_code=404)
        extra = {name: advanced[name] for name in self.fields if name in advanced}
        return parse_course_app(app, extra_values=extra)

    async def save_enablement(self, ref: SettingsRef, enabled: bool) -> None:  # noqa: FBT001
        if ref.app_id is None:
            raise SettingsRequestError("Course app settings need an app id")
        body = CourseAppStatusRequest(id=ref.app_id, enabled=enabled).model_dump()
        async with self.client_factory(self.config.resilience) as client:
            await _send_json(client, "PATCH", self._apps_url(ref), body=body)

    async def save_settings_body(self, ref: SettingsRef, fields: Mapping[str, object]) -> None:
        selected = {name: value for name, value in fields.items() if name in self.fields}
        if not selected:
            return
        async with self.client_factory(self.config.resilience) as client:
            await _send_json(
                client, "PATCH", self._advanced_url(ref), body=advanced_settings_request(selected)
            )


if TYPE_CHECKING:
    _exam_check: SettingsBodyGateway = ExamSettingsGateway.__new__(ExamSettingsGateway)
    _app_check: SettingsBodyGateway = CourseAppGateway.__new__(CourseAppGateway)


__all__ = [
    "ADVANCED_SETTINGS_PATH",
    "COURSE_APPS_PATH",
    "EXAM_SETTINGS_PATH",
    "CourseAppGateway",
    "ExamSettingsGateway",
]
