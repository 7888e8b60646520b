"""Mutable per-field state held by a registration form."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from cadastro.common.masking import Masker
from cadastro.validation.rules import FieldConfig, RuleSet


@dataclass
class FieldState:
    config: FieldConfig
    masker: Optional[Masker] = None
    value: str = ""
    caret: int = 0
    visible: bool = True
    required: bool = field(init=False)
    invalid: bool = False
    message: Optional[str] = None
    lookup_error: Optional[str] = None
    lookup_value: str = ""

    def __post_init__(self) -> None:
        self.required = self.config.rules.required

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def tab(self) -> int:
        return self.config.tab

    @property
    def rules(self) -> RuleSet:
        if self.required == self.config.rules.required:
            return self.config.rules
        return self.config.rules.with_required(self.required)

    def mark(self, message: str) -> None:
        self.invalid = True
        self.message = message

    def mark_valid(self, message: Optional[str] = None) -> None:
        self.invalid = False
        self.message = message

    def fail_lookup(self, message: str) -> None:
        """Marks a failed remote lookup; it outlives rule checks until the value changes."""

        self.lookup_error = message
        self.lookup_value = self.value
        self.mark(message)

    def pending_lookup_error(self) -> Optional[str]:
        if self.lookup_error is not None and self.value == self.lookup_value:
            return self.lookup_error
        return None

    def clear(self) -> None:
        self.value = ""
        self.caret = 0
        self.lookup_error = None
        self.mark_valid()
