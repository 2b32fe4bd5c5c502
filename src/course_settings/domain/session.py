"""Settings session: the controller facade the presentation layer talks to."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from course_settings.domain.loading import LoadOutcome, LoadPipeline
from course_settings.domain.model import Generation, LoadState, SaveState
from course_settings.domain.submission import SaveOutcome, SubmissionOrchestrator
from course_settings.domain.view import SettingsView, build_view, select_view

if TYPE_CHECKING:
    from course_settings.domain.kinds import SettingsKind
    from course_settings.domain.model import (
        FieldLockTable,
        FieldOption,
        SettingsEntity,
        SettingsMetadata,
        SettingsRef,
        ValidationResult,
        ViewMode,
    )
    from course_settings.domain.ports import (
        ActorContextProvider,
        SettingsBodySaver,
        SettingsGateway,
    )

log = getLogger(__name__)


class SettingsSession:
    """Owns one entity while a settings dialog is open.

    All handlers are meant to be driven from a single event loop. Awaiting
    :meth:`load` or :meth:`on_submit` are the only suspension points; a
    :meth:`on_close` in between turns their eventual completion into a no-op.
    """

    def __init__(
        self,
        ref: SettingsRef,
        *,
        kind: SettingsKind,
        gateway: SettingsGateway,
        actor: ActorContextProvider,
        save_body: SettingsBodySaver | None = None,
    ) -> None:
        self.ref = ref
        self.kind = kind
        self._actor = actor
        self._generation = Generation()
        self._loader = LoadPipeline(fetch=gateway.fetch_settings, generation=self._generation)
        self._orchestrator = SubmissionOrchestrator(
            save_enablement=gateway.save_enablement,
            validate=kind.rules.validate,
            save_body=save_body,
            generation=self._generation,
        )
        self._prior: SettingsEntity | None = None
        self._validation: ValidationResult = {}

    # -- state accessors -------------------------------------------------

    @property
    def load_state(self) -> LoadState:
        return self._loader.state

    @property
    def save_state(self) -> SaveState:
        """Save state; ``SUCCESSFUL`` is reported by one read, later reads see ``IDLE``."""

        return self._orchestrator.observe()

    @property
    def validation(self) -> ValidationResult:
        return dict(self._validation)

    @property
    def metadata(self) -> SettingsMetadata | None:
        return self._loader.metadata

    @property
    def view_mode(self) -> ViewMode:
        return select_view(self.load_state, self._orchestrator.state, self._validation)

    def view(self) -> SettingsView:
        entity = self._loader.entity
        return build_view(
            self.load_state,
            self.save_state,
            self._validation,
            enabled=entity.enabled if entity is not None else False,
        )

    def values(self) -> dict[str, object]:
        entity = self._loader.entity
        return entity.as_dict() if entity is not None else {}

    def value(self, name: str) -> object:
        entity = self._loader.entity
        return entity.get(name) if entity is not None else None

    def lock_table(self) -> FieldLockTable:
        entity, metadata = self._loader.entity, self._loader.metadata
        if entity is None or metadata is None:
            return {}
        return self.kind.locks.lock_table(entity, metadata, self._actor())

    def field_options(self, name: str) -> list[FieldOption]:
        entity, metadata = self._loader.entity, self._loader.metadata
        if entity is None or metadata is None:
            return []
        return self.kind.locks.options(name, entity, metadata, self._actor())

    def help_text(self, name: str) -> str:
        default = self.kind.help_text(name)
        metadata = self._loader.metadata
        if metadata is None:
            return default
        return self.kind.locks.help_text(name, metadata, self._actor(), default=default)

    def documentation_link(self, key: str) -> str | None:
        metadata = self._loader.metadata
        if metadata is None:
            return None
        return metadata.documentation_links.get(key)

    # -- event handlers ----------------------------------------------------

    async def load(self) -> LoadOutcome:
        if self._orchestrator.state is SaveState.IN_PROGRESS:
            log.info("Load of %s ignored: a save is in flight", self.ref)
            return LoadOutcome(state=self.load_state, started=False)
        outcome = await self._loader.load(self.ref)
        entity = self._loader.entity
        if outcome.started and not outcome.stale and entity is not None:
            self._prior = entity.snapshot()
            self._validation = {}
            self._orchestrator.reset()
        return outcome

    def on_field_change(self, name: str, value: object) -> ValidationResult:
        entity, metadata = self._loader.entity, self._loader.metadata
        if entity is None or metadata is None:
            log.debug("Ignoring change of %s before settings are loaded", name)
            return self.validation

        if self.kind.locks.is_locked(
            name, value, metadata, self._actor(), current=entity.get(name)
        ):
            log.info("Ignoring change of locked field %s to %r", name, value)
            return self.validation

        entity.set(name, value)
        for target, default in self.kind.rules.coupled_defaults(name, value).items():
            entity.set(target, default)
        self._validation = self.kind.rules.validate(entity.as_dict())
        return self.validation

    async def on_submit(self) -> SaveOutcome:
        entity, prior = self._loader.entity, self._prior
        if entity is None or prior is None:
            return SaveOutcome(state=self._orchestrator.state, accepted=False)

        submitted = entity.snapshot()
        outcome = await self._orchestrator.submit(
            self.ref, submitted, prior, load_state=self.load_state
        )
        if not outcome.accepted or outcome.stale:
            return outcome
        self._validation = dict(outcome.errors)
        if outcome.state is SaveState.SUCCESSFUL:
            self._prior = submitted
        return outcome

    def on_close(self) -> None:
        self._generation.advance()
        self._loader.discard()
        self._orchestrator.reset()
        self._prior = None
        self._validation = {}
        log.debug("Closed settings session for %s", self.ref)


__all__ = ["SettingsSession"]
