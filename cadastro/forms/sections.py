"""Conditional form sections: address copy and spouse details."""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence, Tuple

from cadastro.forms.fields import FieldState

logger = logging.getLogger(__name__)

CHECKED_VALUES = {"on", "true", "1", "sim", "yes"}
MARITAL_STATUSES_WITH_SPOUSE = ("Casado(a)", "União Estável")


def is_checked(value: object) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in CHECKED_VALUES


class SameAddressSection:
    """While the checkbox is ticked the correspondence address is hidden and mirrors the residence one."""

    def __init__(self, checkbox: str, pairs: Sequence[Tuple[str, str]]) -> None:
        self.checkbox = checkbox
        self.pairs = list(pairs)
        self._targets = dict(self.pairs)
        self.checked = False

    def controls(self, name: str) -> bool:
        return name == self.checkbox

    def toggle(self, fields: Mapping[str, FieldState], checked: bool) -> None:
        self.checked = checked
        for source, target in self.pairs:
            target_field = fields[target]
            target_field.visible = not checked
            if checked:
                target_field.value = fields[source].value
                target_field.mark_valid()
        logger.debug("Correspondence address %s", "mirrored" if checked else "released")

    def mirror(self, fields: Mapping[str, FieldState], source: str) -> Optional[str]:
        """Copies ``source`` into its correspondence field; returns the target name when it did."""

        if not self.checked or source not in self._targets:
            return None
        target = self._targets[source]
        fields[target].value = fields[source].value
        return target


class SpouseSection:
    """Shows the spouse subsection, and makes it required, only for married or partnered applicants.

    Hiding the subsection wipes its values so stale hidden data is never submitted.
    """

    def __init__(
        self,
        selector: str,
        fields: Sequence[str],
        optional: Sequence[str] = (),
        statuses: Sequence[str] = MARITAL_STATUSES_WITH_SPOUSE,
    ) -> None:
        self.selector = selector
        self.fields = list(fields)
        self.optional = set(optional)
        self.statuses = set(statuses)
        self.active = False

    def controls(self, name: str) -> bool:
        return name == self.selector

    def requires_spouse(self, marital_status: str) -> bool:
        return (marital_status or "").strip() in self.statuses

    def apply(self, fields: Mapping[str, FieldState], marital_status: str) -> None:
        self.active = self.requires_spouse(marital_status)
        for name in self.fields:
            spouse_field = fields[name]
            spouse_field.visible = self.active
            spouse_field.required = self.active and name not in self.optional
            if not self.active:
                spouse_field.clear()
