"""Field-level validation: applies a ``RuleSet`` to one value."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Callable, Mapping, Optional, Protocol

from cadastro.common.errors import ErrorKind
from cadastro.validation import formats
from cadastro.validation.checksums import classify_document
from cadastro.validation.rules import RuleSet

TodayProvider = Callable[[], date]


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    message: Optional[str] = None
    error: Optional[ErrorKind] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(True)

    @classmethod
    def fail(cls, message: str, error: ErrorKind = ErrorKind.INVALID_FORMAT) -> "ValidationResult":
        return cls(False, message, error)


class Validator(Protocol):
    def validate(
        self,
        value: str,
        rules: RuleSet,
        context: Optional[Mapping[str, str]] = None,
    ) -> ValidationResult: ...


class FieldValidator:
    """Runs every active rule of a field in a fixed order, stopping at the first failure.

    ``context`` maps other field names to their current values; it is used by
    the ``match`` rule and by ``document_number``, which reads the document
    type from a sibling field.
    """

    def __init__(self, today: Optional[TodayProvider] = None) -> None:
        self._today = today or date.today

    def validate(
        self,
        value: str,
        rules: RuleSet,
        context: Optional[Mapping[str, str]] = None,
    ) -> ValidationResult:
        value = (value or "").strip()
        context = context or {}

        if rules.required and not value:
            return ValidationResult.fail(rules.message_for("required"))
        if not value:
            return ValidationResult.ok()

        for check in (
            self._check_name,
            self._check_documents,
            self._check_contact,
            self._check_dates,
            self._check_lengths,
        ):
            result = check(value, rules, context)
            if result is not None:
                return result
        return ValidationResult.ok()

    def _check_name(self, value: str, rules: RuleSet, context: Mapping[str, str]) -> Optional[ValidationResult]:
        if rules.name and not formats.is_valid_name(value):
            return ValidationResult.fail(rules.message_for("name"))
        return None

    def _check_documents(self, value: str, rules: RuleSet, context: Mapping[str, str]) -> Optional[ValidationResult]:
        for kind in ("cpf", "cnpj"):
            if getattr(rules, kind):
                error = classify_document(value, kind)
                if error is not None:
                    return ValidationResult.fail(rules.message_for(kind), error)
        if rules.document_number:
            doc_type = (context.get(rules.document_number) or "").strip()
            if not formats.is_valid_document_number(value, doc_type):
                return ValidationResult.fail(
                    rules.messages.get("document_number") or f"Formato inválido para {doc_type}",
                )
        return None

    def _check_contact(self, value: str, rules: RuleSet, context: Mapping[str, str]) -> Optional[ValidationResult]:
        if rules.email and not formats.is_valid_email(value):
            return ValidationResult.fail(rules.message_for("email"))
        if rules.phone and not formats.is_valid_phone(value):
            return ValidationResult.fail(rules.message_for("phone"))
        if rules.cep and not formats.is_valid_cep(value):
            return ValidationResult.fail(rules.message_for("cep"))
        return None

    def _check_dates(self, value: str, rules: RuleSet, context: Mapping[str, str]) -> Optional[ValidationResult]:
        if (rules.date or rules.age or rules.issuance_date) and not formats.is_valid_date(value):
            return ValidationResult.fail(rules.message_for("date"))
        today = self._today()
        if rules.age and not formats.is_adult(value, today=today):
            return ValidationResult.fail(rules.message_for("age"))
        if rules.issuance_date and not formats.is_valid_issuance_date(value, today=today):
            return ValidationResult.fail(rules.message_for("issuance_date"))
        return None

    def _check_lengths(self, value: str, rules: RuleSet, context: Mapping[str, str]) -> Optional[ValidationResult]:
        if rules.min_length is not None and len(value) < rules.min_length:
            return ValidationResult.fail(rules.message_for("min_length", rules.min_length))
        if rules.max_length is not None and len(value) > rules.max_length:
            return ValidationResult.fail(rules.message_for("max_length", rules.max_length))
        if rules.pattern and not re.search(rules.pattern, value):
            return ValidationResult.fail(rules.message_for("pattern"))
        if rules.match is not None and value != (context.get(rules.match) or "").strip():
            return ValidationResult.fail(rules.message_for("match"))
        return None


SINGLE_VALUE_RULES = ("cpf", "cnpj", "email", "phone", "cep", "date", "age", "issuance_date", "name")


def validate_value(kind: str, value: str, validator: Optional[Validator] = None) -> ValidationResult:
    """Validates one standalone value against a single rule, as a required field."""

    if kind not in SINGLE_VALUE_RULES:
        raise ValueError(f"Regra desconhecida: {kind}")
    rules = RuleSet(required=True, **{kind: True})
    return (validator or FieldValidator()).validate(value, rules)
