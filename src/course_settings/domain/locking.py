"""Actor- and time-based locking of individual fields and options.

A field listed in ``cutoff_fields`` freezes once the course has started,
unless the actor is an administrator. A frozen field keeps its current value
selectable so the form never shows it blank; every other option is locked.

The cutoff comparison is deliberately calendar-naive: the actor's instant is
rendered as ``YYYY-MM-DDTHH:MM:SSZ`` without any timezone conversion and
compared as a string against ``course_start_date`` exactly as the server sent
it. A missing start date compares as the empty string, i.e. already passed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from course_settings.domain.model import FieldOption

if TYPE_CHECKING:
    from course_settings.domain.model import (
        ActorContext,
        FieldLockTable,
        SettingsEntity,
        SettingsMetadata,
    )

CUTOFF_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def cutoff_timestamp(actor: ActorContext) -> str:
    return actor.now.strftime(CUTOFF_TIMESTAMP_FORMAT)


def is_past_cutoff(metadata: SettingsMetadata, actor: ActorContext) -> bool:
    return cutoff_timestamp(actor) > (metadata.course_start_date or "")


@dataclass(frozen=True, slots=True)
class FieldLockPolicy:
    """Pure lock rules for the fields governed by the course start cutoff."""

    cutoff_fields: frozenset[str] = field(default_factory=frozenset)
    frozen_help: str = ""

    def is_frozen(self, name: str, metadata: SettingsMetadata, actor: ActorContext) -> bool:
        if name not in self.cutoff_fields:
            return False
        return not actor.is_admin and is_past_cutoff(metadata, actor)

    def is_locked(
        self,
        name: str,
        candidate: object,
        metadata: SettingsMetadata,
        actor: ActorContext,
        *,
        current: object,
    ) -> bool:
        """Return whether ``candidate`` may not be chosen for field ``name``."""

        if not self.is_frozen(name, metadata, actor):
            return False
        return candidate != current

    def lock_table(
        self,
        entity: SettingsEntity,
        metadata: SettingsMetadata,
        actor: ActorContext,
    ) -> FieldLockTable:
        table: FieldLockTable = {}
        for name in sorted(self.cutoff_fields):
            table[name] = self.is_frozen(name, metadata, actor)
            current = entity.get(name)
            for option in metadata.options_for(name):
                table[(name, option)] = self.is_locked(
                    name, option, metadata, actor, current=current
                )
        return table

    def options(
        self,
        name: str,
        entity: SettingsEntity,
        metadata: SettingsMetadata,
        actor: ActorContext,
    ) -> list[FieldOption]:
        current = entity.get(name)
        return [
            FieldOption(
                value=option,
                label=str(option),
                disabled=self.is_locked(name, option, metadata, actor, current=current),
            )
            for option in metadata.options_for(name)
        ]

    def help_text(
        self,
        name: str,
        metadata: SettingsMetadata,
        actor: ActorContext,
        *,
        default: str = "",
    ) -> str:
        if self.frozen_help and self.is_frozen(name, metadata, actor):
            return self.frozen_help
        return default


__all__ = ["CUTOFF_TIMESTAMP_FORMAT", "FieldLockPolicy", "cutoff_timestamp", "is_past_cutoff"]
