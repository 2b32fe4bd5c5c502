"""Rule tables for the settings entities the controller knows how to edit."""

from __future__ import annotations

from dataclasses import dataclass, field

from course_settings.domain.locking import FieldLockPolicy
from course_settings.domain.model import ENABLED_FIELD
from course_settings.domain.validation import (
    ConditionalRule,
    FieldRule,
    RuleSet,
    is_bool,
    is_str,
    is_valid_email,
)

PROVIDER_FIELD = "provider"
ESCALATION_EMAIL_FIELD = "escalation_email"
CREATE_ZENDESK_TICKETS_FIELD = "create_zendesk_tickets"
ALLOW_OPTING_OUT_FIELD = "allow_opting_out"

PROCTORTRACK = "proctortrack"
SOFTWARE_SECURE = "software_secure"

ESCALATION_EMAIL_MESSAGE = (
    "A valid escalation email must be provided if Proctortrack is the selected provider."
)
PROVIDER_FROZEN_HELP = "Proctoring provider cannot be modified after course start date."
PROVIDER_HELP = "Select the proctoring provider you want to use for this course run."


def _must_be_bool(name: str) -> FieldRule:
    return FieldRule(name, is_bool, f"{name} must be true or false.")


@dataclass(frozen=True, slots=True)
class SettingsKind:
    """Everything the controller needs to know about one kind of settings entity."""

    name: str
    rules: RuleSet
    locks: FieldLockPolicy = field(default_factory=FieldLockPolicy)
    help_texts: dict[str, str] = field(default_factory=dict)

    def help_text(self, name: str) -> str:
        return self.help_texts.get(name, "")


EXAM_SETTINGS = SettingsKind(
    name="exam_settings",
    rules=RuleSet(
        static=(
            _must_be_bool(ENABLED_FIELD),
            _must_be_bool(ALLOW_OPTING_OUT_FIELD),
            FieldRule(PROVIDER_FIELD, is_str, "Select a proctoring provider."),
            _must_be_bool(CREATE_ZENDESK_TICKETS_FIELD),
        ),
        conditional=(
            ConditionalRule(
                when_field=PROVIDER_FIELD,
                equals=PROCTORTRACK,
                target=ESCALATION_EMAIL_FIELD,
                required=True,
                check=is_valid_email,
                message=ESCALATION_EMAIL_MESSAGE,
                defaults={CREATE_ZENDESK_TICKETS_FIELD: False},
            ),
            ConditionalRule(
                when_field=PROVIDER_FIELD,
                equals=SOFTWARE_SECURE,
                defaults={CREATE_ZENDESK_TICKETS_FIELD: True},
            ),
        ),
    ),
    locks=FieldLockPolicy(
        cutoff_fields=frozenset({PROVIDER_FIELD}),
        frozen_help=PROVIDER_FROZEN_HELP,
    ),
    help_texts={
        ENABLED_FIELD: "If checked, proctored exams are enabled in your course.",
        ALLOW_OPTING_OUT_FIELD: (
            "If checked, learners can choose to take proctored exams without proctoring. "
            "If not checked, all learners must take the exam with proctoring."
        ),
        PROVIDER_FIELD: PROVIDER_HELP,
        ESCALATION_EMAIL_FIELD: (
            "Required if 'proctortrack' is selected as your proctoring provider. Enter an "
            "email address to be contacted by the support team whenever there are "
            "escalations (e.g. appeals, delayed reviews, etc.)."
        ),
        CREATE_ZENDESK_TICKETS_FIELD: (
            "If checked, a Zendesk ticket will be created for suspicious attempts."
        ),
    },
)


def app_settings_kind(
    app_id: str,
    *,
    extra_rules: tuple[FieldRule, ...] = (),
    conditional: tuple[ConditionalRule, ...] = (),
    help_texts: dict[str, str] | None = None,
) -> SettingsKind:
    """Settings of a single course app: ``enabled`` plus any app-specific fields."""

    return SettingsKind(
        name=f"app:{app_id}",
        rules=RuleSet(static=(_must_be_bool(ENABLED_FIELD),)).extend(
            static=extra_rules, conditional=conditional
        ),
        help_texts=dict(help_texts or {}),
    )


__all__ = [
    "ALLOW_OPTING_OUT_FIELD",
    "CREATE_ZENDESK_TICKETS_FIELD",
    "ESCALATION_EMAIL_FIELD",
    "ESCALATION_EMAIL_MESSAGE",
    "EXAM_SETTINGS",
    "PROCTORTRACK",
    "PROVIDER_FIELD",
    "PROVIDER_FROZEN_HELP",
    "SOFTWARE_SECURE",
    "SettingsKind",
    "app_settings_kind",
]
