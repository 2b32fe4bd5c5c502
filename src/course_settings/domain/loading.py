"""Load pipeline: fetch entity and metadata, classify the outcome."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from course_settings.domain.model import Generation, LoadState
from course_settings.domain.ports.settings import FORBIDDEN_STATUS, SettingsRequestError

if TYPE_CHECKING:
    from course_settings.domain.model import SettingsEntity, SettingsMetadata, SettingsRef
    from course_settings.domain.ports.settings import SettingsFetcher

log = getLogger(__name__)


@dataclass(slots=True, frozen=True)
class LoadOutcome:
    state: LoadState
    started: bool = True
    stale: bool = False
    status_code: int | None = None


def classify_failure(exc: BaseException) -> tuple[LoadState, int | None]:
    """Map a fetch failure onto the terminal load state it produces."""

    status_code = exc.status_code if isinstance(exc, SettingsRequestError) else None
    if status_code == FORBIDDEN_STATUS:
        return LoadState.PERMISSION_DENIED, status_code
    return LoadState.CONNECTION_FAILED, status_code


@dataclass(slots=True)
class LoadPipeline:
    """Single-flight loader that owns the session's entity and metadata.

    ``load`` is ignored while a previous load is outstanding. Results that
    resolve after :meth:`discard` (or after the generation moved on for any
    other reason) are dropped without touching state.
    """

    fetch: SettingsFetcher
    generation: Generation = field(default_factory=Generation)
    state: LoadState = LoadState.IDLE
    entity: SettingsEntity | None = None
    metadata: SettingsMetadata | None = None
    status_code: int | None = None

    async def load(self, ref: SettingsRef) -> LoadOutcome:
        if self.state is LoadState.LOADING:
            log.debug("Load of %s ignored: another load is in flight", ref)
            return LoadOutcome(state=self.state, started=False)

        token = self.generation.current
        self.state = LoadState.LOADING
        self.entity = None
        self.metadata = None
        self.status_code = None
        log.info("Loading settings for %s", ref)

        try:
            loaded = await self.fetch(ref)
        except Exception as exc:  # noqa: BLE001
            if not self.generation.is_current(token):
                log.debug("Discarding late load failure for %s", ref)
                return LoadOutcome(state=self.state, stale=True)
            self.state, self.status_code = classify_failure(exc)
            log.warning(
                "Loading settings for %s failed (%s, status=%s): %s",
                ref,
                self.state,
                self.status_code,
                exc,
            )
            return LoadOutcome(state=self.state, status_code=self.status_code)

        if not self.generation.is_current(token):
            log.debug("Discarding late load result for %s", ref)
            return LoadOutcome(state=self.state, stale=True)

        self.entity = loaded.entity
        self.metadata = loaded.metadata
        self.state = LoadState.LOADED
        log.info("Loaded settings for %s", ref)
        return LoadOutcome(state=self.state)

    def discard(self) -> None:
        """Forget the loaded entity; the caller advances the generation."""

        self.state = LoadState.IDLE
        self.entity = None
        self.metadata = None
        self.status_code = None


__all__ = ["LoadOutcome", "LoadPipeline", "classify_failure"]
