"""Submission orchestrator: sequence the save requests of one settings session."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from course_settings.domain.model import Generation, LoadState, SaveState, ValidationResult
from course_settings.domain.ports.settings import SettingsRequestError

if TYPE_CHECKING:
    from course_settings.domain.model import SettingsEntity, SettingsRef
    from course_settings.domain.ports.settings import EnablementSaver, SettingsBodySaver

log = getLogger(__name__)

type Validator = Callable[[Mapping[str, object]], ValidationResult]

_SUBMITTABLE = frozenset({SaveState.IDLE, SaveState.FAILED, SaveState.SUCCESSFUL})


@dataclass(slots=True, frozen=True)
class SaveOutcome:
    state: SaveState
    accepted: bool = True
    stale: bool = False
    errors: ValidationResult = field(default_factory=dict)
    enablement_saved: bool = False
    body_saved: bool = False
    status_code: int | None = None


@dataclass(slots=True)
class SubmissionOrchestrator:
    """Runs at most one save at a time and reports a single terminal state.

    The enablement toggle is sent only when ``enabled`` changed and always
    completes before the body save starts. ``SUCCESSFUL`` is handed out once by
    :meth:`observe` and then reset to ``IDLE``; a new submit consumes a pending
    success that was never observed.
    """

    save_enablement: EnablementSaver
    validate: Validator
    save_body: SettingsBodySaver | None = None
    generation: Generation = field(default_factory=Generation)
    _state: SaveState = SaveState.IDLE
    errors: ValidationResult = field(default_factory=dict)
    status_code: int | None = None

    @property
    def state(self) -> SaveState:
        return self._state

    def observe(self) -> SaveState:
        """Read the save state, consuming a pending success signal."""

        state = self._state
        if state is SaveState.SUCCESSFUL:
            self._state = SaveState.IDLE
        return state

    def reset(self) -> None:
        self._state = SaveState.IDLE
        self.errors = {}
        self.status_code = None

    async def submit(
        self,
        ref: SettingsRef,
        entity: SettingsEntity,
        prior: SettingsEntity,
        *,
        load_state: LoadState = LoadState.LOADED,
    ) -> SaveOutcome:
        if load_state is not LoadState.LOADED or self._state not in _SUBMITTABLE:
            log.debug("Submit for %s rejected (load=%s, save=%s)", ref, load_state, self._state)
            return SaveOutcome(state=self._state, accepted=False)

        if self._state is SaveState.SUCCESSFUL:
            log.debug("Previous save of %s succeeded unobserved; starting a new one", ref)
        token = self.generation.current
        self._state = SaveState.IN_PROGRESS
        self.status_code = None
        values = entity.snapshot()

        self.errors = self.validate(values.as_dict())
        if self.errors:
            self._state = SaveState.FAILED
            log.info("Save of %s blocked by validation: %s", ref, sorted(self.errors))
            return SaveOutcome(state=self._state, errors=dict(self.errors))

        enablement_saved = False
        body_saved = False
        try:
            if values.enabled != prior.enabled:
                log.info("Setting enabled=%s for %s", values.enabled, ref)
                await self.save_enablement(ref, values.enabled)
                enablement_saved = True
                if not self.generation.is_current(token):
                    return self._stale(ref)
            if self.save_body is not None:
                await self.save_body(ref, values.body())
                body_saved = True
                if not self.generation.is_current(token):
                    return self._stale(ref)
        except Exception as exc:  # noqa: BLE001
            if not self.generation.is_current(token):
                return self._stale(ref)
            self.status_code = exc.status_code if isinstance(exc, SettingsRequestError) else None
            self._state = SaveState.FAILED
            log.warning("Saving settings for %s failed (status=%s): %s", ref, self.status_code, exc)
            return SaveOutcome(
                state=self._state,
                enablement_saved=enablement_saved,
                body_saved=body_saved,
                status_code=self.status_code,
            )

        self._state = SaveState.SUCCESSFUL
        log.info("Saved settings for %s", ref)
        return SaveOutcome(
            state=self._state,
            enablement_saved=enablement_saved,
            body_saved=body_saved,
        )

    def _stale(self, ref: SettingsRef) -> SaveOutcome:
        log.debug("Discarding late save completion for %s", ref)
        return SaveOutcome(state=self._state, stale=True)


__all__ = ["SaveOutcome", "SubmissionOrchestrator", "Validator"]
