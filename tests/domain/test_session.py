from __future__ import annotations

import asyncio

from course_settings.domain.kinds import EXAM_SETTINGS, PROVIDER_HELP, app_settings_kind
from course_settings.domain.model import LoadState, SaveState, SettingsRef, ViewMode
from course_settings.domain.ports.settings import SettingsRequestError
from course_settings.domain.session import SettingsSession
from tests.support.settings import (
    AFTER_START,
    FakeSettingsGateway,
    FixedActor,
    exam_values,
    loaded,
)

EXAM_REF = SettingsRef(course_id="course-v1:edX+DemoX+Demo_Course")
APP_REF = SettingsRef(course_id="course-v1:edX+DemoX+Demo_Course", app_id="wiki")


def _exam_session(
    gateway: FakeSettingsGateway,
    actor: FixedActor | None = None,
) -> SettingsSession:
    return SettingsSession(
        EXAM_REF,
        kind=EXAM_SETTINGS,
        gateway=gateway,
        actor=actor or FixedActor(),
        save_body=gateway.save_settings_body,
    )


def test_enable_app_end_to_end() -> None:
    gateway = FakeSettingsGateway(loaded({"enabled": False}))
    session = SettingsSession(
        APP_REF, kind=app_settings_kind("wiki"), gateway=gateway, actor=FixedActor()
    )

    async def scenario() -> None:
        await session.load()
        assert session.view_mode is ViewMode.FORM
        assert not session.view().show_body

        session.on_field_change("enabled", True)
        assert session.view().show_body
        await session.on_submit()

    asyncio.run(scenario())

    assert gateway.enablement_calls == [True]
    assert gateway.body_calls == []
    assert session.save_state is SaveState.SUCCESSFUL
    assert session.save_state is SaveState.IDLE


def test_view_follows_load_state() -> None:
    gateway = FakeSettingsGateway(fetch_error=SettingsRequestError("no", status_code=403))
    session = _exam_session(gateway)

    assert session.view_mode is ViewMode.SPINNER
    asyncio.run(session.load())

    assert session.load_state is LoadState.PERMISSION_DENIED
    assert session.view_mode is ViewMode.PERMISSION_ERROR
    assert session.values() == {}
    assert session.lock_table() == {}


def test_provider_change_applies_coupled_default_and_validation() -> None:
    session = _exam_session(FakeSettingsGateway())
    asyncio.run(session.load())

    errors = session.on_field_change("provider", "proctortrack")

    assert session.value("create_zendesk_tickets") is False
    assert set(errors) == {"escalation_email"}

    errors = session.on_field_change("escalation_email", "team@example.com")
    assert errors == {}

    session.on_field_change("provider", "software_secure")
    assert session.value("create_zendesk_tickets") is True


def test_invalid_submit_surfaces_messages_without_requests() -> None:
    gateway = FakeSettingsGateway(loaded(exam_values(provider="proctortrack")))
    session = _exam_session(gateway)
    asyncio.run(session.load())
    assert session.validation == {}

    outcome = asyncio.run(session.on_submit())

    assert outcome.state is SaveState.FAILED
    assert set(session.validation) == {"escalation_email"}
    assert gateway.enablement_calls == []
    assert gateway.body_calls == []


def test_locked_provider_change_is_ignored_for_non_admin() -> None:
    actor = FixedActor(now=AFTER_START)
    session = _exam_session(FakeSettingsGateway(), actor)
    asyncio.run(session.load())

    session.on_field_change("provider", "proctortrack")

    assert session.value("provider") == "software_secure"
    assert session.value("create_zendesk_tickets") is True
    assert session.lock_table()["provider"] is True
    assert [option.disabled for option in session.field_options("provider")] == [
        True,
        True,
        False,
    ]

    actor.is_admin = True
    session.on_field_change("provider", "proctortrack")
    assert session.value("provider") == "proctortrack"
    assert session.help_text("provider") == PROVIDER_HELP


def test_close_during_save_discards_completion() -> None:
    gateway = FakeSettingsGateway(loaded(exam_values(enabled=False)))
    session = _exam_session(gateway)

    async def scenario() -> None:
        await session.load()
        session.on_field_change("enabled", True)
        gateway.save_gate = asyncio.Event()
        pending = asyncio.create_task(session.on_submit())
        await asyncio.sleep(0)
        assert session.view().submit_button == "pending"

        session.on_close()
        gateway.save_gate.set()
        outcome = await pending
        assert outcome.stale

    asyncio.run(scenario())

    assert session.load_state is LoadState.IDLE
    assert session.save_state is SaveState.IDLE
    assert session.values() == {}


def test_successful_save_becomes_new_baseline() -> None:
    gateway = FakeSettingsGateway(loaded(exam_values(enabled=False)))
    session = _exam_session(gateway)

    async def scenario() -> None:
        await session.load()
        session.on_field_change("enabled", True)
        await session.on_submit()
        assert session.save_state is SaveState.SUCCESSFUL
        await session.on_submit()

    asyncio.run(scenario())

    assert gateway.enablement_calls == [True]
    assert len(gateway.body_calls) == 2


def test_field_change_before_load_is_ignored() -> None:
    session = _exam_session(FakeSettingsGateway())

    assert session.on_field_change("enabled", False) == {}
    assert session.values() == {}
    assert session.documentation_link("learn_more_configuration") is None


def test_reload_during_save_is_ignored() -> None:
    gateway = FakeSettingsGateway(loaded(exam_values(enabled=False)))
    session = _exam_session(gateway)

    async def scenario() -> None:
        await session.load()
        session.on_field_change("enabled", True)
        gateway.save_gate = asyncio.Event()
        pending = asyncio.create_task(session.on_submit())
        await asyncio.sleep(0)

        reload = await session.load()
        assert not reload.started
        assert session.load_state is LoadState.LOADED
        assert session.view().submit_button == "pending"

        again = await session.on_submit()
        assert not again.accepted

        gateway.save_gate.set()
        outcome = await pending
        assert outcome.state is SaveState.SUCCESSFUL

    asyncio.run(scenario())

    assert len(gateway.fetch_calls) == 1
    assert gateway.enablement_calls == [True]
    assert len(gateway.body_calls) == 1


def test_rendered_success_is_consumed_and_allows_next_save() -> None:
    gateway = FakeSettingsGateway()
    session = _exam_session(gateway)

    async def scenario() -> None:
        await session.load()
        session.on_field_change("allow_opting_out", True)
        await session.on_submit()
        assert session.view().save_state is SaveState.SUCCESSFUL
        assert session.view().save_state is SaveState.IDLE

        session.on_field_change("allow_opting_out", False)
        second = await session.on_submit()
        assert second.accepted

    asyncio.run(scenario())

    assert [call["allow_opting_out"] for call in gateway.body_calls] == [True, False]
