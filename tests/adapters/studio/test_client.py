from __future__ import annotations

import asyncio
import json
from collections.abc import Callable

import httpx
import pytest

from course_settings.adapters.http_resilience import ResilienceConfig, ResilientClient
from course_settings.adapters.studio import CourseAppGateway, ExamSettingsGateway
from course_settings.config.studio import StudioConfig
from course_settings.domain.model import SettingsRef
from course_settings.domain.ports.settings import SettingsRequestError

COURSE_ID = "course-v1:edX+DemoX+Demo_Course"
EXAM_URL = f"http://studio.test/api/contentstore/v1/proctored_exam_settings/{COURSE_ID}"
APPS_URL = f"http://studio.test/api/course_apps/v1/apps/{COURSE_ID}"
ADVANCED_URL = f"http://studio.test/api/contentstore/v0/advanced_settings/{COURSE_ID}"


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(transport=httpx.MockTransport(async_handler))  # noqa: SLF001  # type: ignore[reportPrivateUsage]
        return client

    return factory


class Recorder:
    def __init__(self, responses: dict[tuple[str, str], httpx.Response]) -> None:
        self.responses = responses
        self.requests: list[tuple[str, str, object]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, str(request.url), body))
        return self.responses[(request.method, str(request.url))]


def test_exam_gateway_fetch(
    studio_config: StudioConfig,
    exam_payload: dict[str, object],
) -> None:
    recorder = Recorder({("GET", EXAM_URL): httpx.Response(200, json=exam_payload)})
    gateway = ExamSettingsGateway(
        config=studio_config, client_factory=_make_client_factory(recorder)
    )

    loaded = asyncio.run(gateway.fetch_settings(SettingsRef(course_id=COURSE_ID)))

    assert loaded.entity.get("provider") == "software_secure"
    assert recorder.requests == [("GET", EXAM_URL, None)]


@pytest.mark.parametrize("status", [403, 404, 500])
def test_exam_gateway_fetch_carries_status(studio_config: StudioConfig, status: int) -> None:
    recorder = Recorder({("GET", EXAM_URL): httpx.Response(status, json={"detail": "x"})})
    gateway = ExamSettingsGateway(
        config=studio_config, client_factory=_make_client_factory(recorder)
    )

    with pytest.raises(SettingsRequestError) as excinfo:
        asyncio.run(gateway.fetch_settings(SettingsRef(course_id=COURSE_ID)))

    assert excinfo.value.status_code == status
    assert excinfo.value.is_permission_denied is (status == 403)


def test_exam_gateway_malformed_payload_has_no_status(studio_config: StudioConfig) -> None:
    recorder = Recorder({("GET", EXAM_URL): httpx.Response(200, json={"unexpected": True})})
    gateway = ExamSettingsGateway(
        config=studio_config, client_factory=_make_client_factory(recorder)
    )

    with pytest.raises(SettingsRequestError) as excinfo:
        asyncio.run(gateway.fetch_settings(SettingsRef(course_id=COURSE_ID)))

    assert excinfo.value.status_code is None


def test_exam_gateway_network_error(studio_config: StudioConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    gateway = ExamSettingsGateway(
        config=studio_config, client_factory=_make_client_factory(handler)
    )

    with pytest.raises(SettingsRequestError) as excinfo:
        asyncio.run(gateway.fetch_settings(SettingsRef(course_id=COURSE_ID)))

    assert excinfo.value.status_code is None


def test_exam_gateway_saves(studio_config: StudioConfig) -> None:
    recorder = Recorder({("POST", EXAM_URL): httpx.Response(200, json={})})
    gateway = ExamSettingsGateway(
        config=studio_config, client_factory=_make_client_factory(recorder)
    )
    ref = SettingsRef(course_id=COURSE_ID)

    async def scenario() -> None:
        await gateway.save_enablement(ref, False)  # noqa: FBT003
        await gateway.save_settings_body(ref, {"provider": "proctortrack"})

    asyncio.run(scenario())

    assert recorder.requests == [
        ("POST", EXAM_URL, {"proctored_exam_settings": {"enable_proctored_exams": False}}),
        ("POST", EXAM_URL, {"proctored_exam_settings": {"proctoring_provider": "proctortrack"}}),
    ]


def test_course_app_gateway_round_trip(
    studio_config: StudioConfig,
    course_apps_payload: list[dict[str, object]],
) -> None:
    recorder = Recorder(
        {
            ("GET", APPS_URL): httpx.Response(200, json=course_apps_payload),
            ("GET", ADVANCED_URL): httpx.Response(
                200,
                json={
                    "show_grades": {"value": True, "display_name": "Show grades"},
                    "other": {"value": 1},
                },
            ),
            ("PATCH", APPS_URL): httpx.Response(200, json={"id": "progress", "enabled": False}),
            ("PATCH", ADVANCED_URL): httpx.Response(200, json={}),
        }
    )
    gateway = CourseAppGateway(
        config=studio_config,
        fields=("show_grades",),
        client_factory=_make_client_factory(recorder),
    )
    ref = SettingsRef(course_id=COURSE_ID, app_id="progress")

    async def scenario() -> None:
        loaded = await gateway.fetch_settings(ref)
        assert loaded.entity.as_dict() == {"enabled": True, "show_grades": True}
        await gateway.save_enablement(ref, False)  # noqa: FBT003
        await gateway.save_settings_body(ref, {"show_grades": False, "ignored": 1})

    asyncio.run(scenario())

    assert recorder.requests[2:] == [
        ("PATCH", APPS_URL, {"id": "progress", "enabled": False}),
        ("PATCH", ADVANCED_URL, {"show_grades": {"value": False}}),
    ]


def test_course_app_gateway_without_fields_skips_advanced_settings(
    studio_config: StudioConfig,
    course_apps_payload: list[dict[str, object]],
) -> None:
    recorder = Recorder({("GET", APPS_URL): httpx.Response(200, json=course_apps_payload)})
    gateway = CourseAppGateway(config=studio_config, client_factory=_make_client_factory(recorder))
    ref = SettingsRef(course_id=COURSE_ID, app_id="wiki")

    async def scenario() -> None:
        loaded = await gateway.fetch_settings(ref)
        assert loaded.entity.as_dict() == {"enabled": False}
        await gateway.save_settings_body(ref, {"anything": 1})

    asyncio.run(scenario())

    assert [method for method, _, _ in recorder.requests] == ["GET"]


def test_course_app_gateway_unknown_app(
    studio_config: StudioConfig,
    course_apps_payload: list[dict[str, object]],
) -> None:
    recorder = Recorder({("GET", APPS_URL): httpx.Response(200, json=course_apps_payload)})
    gateway = CourseAppGateway(config=studio_config, client_factory=_make_client_factory(recorder))

    with pytest.raises(SettingsRequestError, match="not found"):
        asyncio.run(gateway.fetch_settings(SettingsRef(course_id=COURSE_ID, app_id="teams")))
