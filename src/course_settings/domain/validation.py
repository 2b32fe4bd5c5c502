"""Declarative field validation and coupled-default rules.

Two layers compose into one :class:`RuleSet`:

* static rules check the type or shape of a single field;
* conditional rules look at one field of the whole entity and, when it holds a
  given value, add a required/format constraint to a *different* field and/or
  declare coupled defaults that a field-change event assigns.

Rules run in insertion order (static before conditional) and the first failing
rule for a field wins, so each field carries at most one message.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from logging import getLogger

from course_settings.domain.model import ValidationResult

log = getLogger(__name__)

type FieldCheck = Callable[[object], bool]

_EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s.]+(?:\.[^@\s.]+)+")


def is_bool(value: object) -> bool:
    return isinstance(value, bool)


def is_str(value: object) -> bool:
    return isinstance(value, str)


def is_valid_email(value: object) -> bool:
    """Local part, ``@``, a dotted domain and no surrounding whitespace."""

    if not isinstance(value, str) or value != value.strip():
        return False
    return _EMAIL_PATTERN.fullmatch(value) is not None


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


@dataclass(frozen=True, slots=True)
class FieldRule:
    """Static rule on a single field; absent fields are not checked."""

    field: str
    check: FieldCheck
    message: str

    def evaluate(self, values: Mapping[str, object]) -> str | None:
        if self.field not in values:
            return None
        if self.check(values[self.field]):
            return None
        return self.message


@dataclass(frozen=True, slots=True)
class ConditionalRule:
    """Constraint and defaults that apply while ``when_field == equals``."""

    when_field: str
    equals: object
    target: str | None = None
    required: bool = False
    check: FieldCheck | None = None
    message: str = ""
    defaults: Mapping[str, object] = field(default_factory=dict)

    def applies(self, values: Mapping[str, object]) -> bool:
        return values.get(self.when_field) == self.equals

    def evaluate(self, values: Mapping[str, object]) -> str | None:
        if self.target is None or not self.applies(values):
            return None
        value = values.get(self.target)
        if self.required and _is_blank(value):
            return self.message
        if self.check is not None and not self.check(value):
            return self.message
        return None


@dataclass(frozen=True, slots=True)
class RuleSet:
    static: tuple[FieldRule, ...] = ()
    conditional: tuple[ConditionalRule, ...] = ()

    def extend(
        self,
        *,
        static: tuple[FieldRule, ...] = (),
        conditional: tuple[ConditionalRule, ...] = (),
    ) -> RuleSet:
        """Return a new rule set with extra rules appended after the existing ones."""

        return RuleSet(
            static=(*self.static, *static),
            conditional=(*self.conditional, *conditional),
        )

    def validate(self, values: Mapping[str, object]) -> ValidationResult:
        errors: ValidationResult = {}
        for rule in self.static:
            if rule.field in errors:
                continue
            message = rule.evaluate(values)
            if message is not None:
                errors[rule.field] = message
        for rule in self.conditional:
            if rule.target is None or rule.target in errors:
                continue
            message = rule.evaluate(values)
            if message is not None:
                errors[rule.target] = message
        return errors

    def coupled_defaults(self, name: str, value: object) -> dict[str, object]:
        """Assignments triggered by setting ``name`` to ``value``.

        Only rules keyed on ``name`` contribute; the returned assignments are
        not themselves re-evaluated as change events.
        """

        assignments: dict[str, object] = {}
        for rule in self.conditional:
            if rule.when_field != name or rule.equals != value:
                continue
            for target, default in rule.defaults.items():
                if target != name:
                    assignments[target] = default
        if assignments:
            log.debug("Coupled defaults for %s=%r: %s", name, value, assignments)
        return assignments


__all__ = [
    "ConditionalRule",
    "FieldCheck",
    "FieldRule",
    "RuleSet",
    "is_bool",
    "is_str",
    "is_valid_email",
]
