"""Display masks for Brazilian form fields.

Every mask strips the value down to its significant characters (digits, or
letters and digits for passports) and re-inserts the literal separators at
fixed group boundaries as characters arrive. Numeric masks (currency,
percent, number) parse the cleaned value as a float and render it with pt-BR
grouping and two decimals.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


class MaskType(str, Enum):
    CPF = "cpf"
    CNPJ = "cnpj"
    PHONE = "phone"
    DATE = "date"
    CEP = "cep"
    RG = "rg"
    CNH = "cnh"
    PASSPORT = "passport"
    CURRENCY = "currency"
    PERCENT = "percent"
    NUMBER = "number"


NUMERIC_MASKS = frozenset({MaskType.CURRENCY, MaskType.PERCENT, MaskType.NUMBER})
ALPHANUMERIC_MASKS = frozenset({MaskType.PASSPORT})

# (group sizes, separator written before each group)
_LAYOUTS: Dict[MaskType, Tuple[Tuple[int, ...], Tuple[str, ...]]] = {
    MaskType.CPF: ((3, 3, 3, 2), ("", ".", ".", "-")),
    MaskType.CNPJ: ((2, 3, 3, 4, 2), ("", ".", ".", "/", "-")),
    MaskType.DATE: ((2, 2, 4), ("", "/", "/")),
    MaskType.CEP: ((5, 3), ("", "-")),
    MaskType.RG: ((2, 3, 3, 2), ("", ".", ".", "-")),
    MaskType.CNH: ((11,), ("",)),
}

_PHONE_LANDLINE = ((2, 4, 4), ("(", ") ", "-"))
_PHONE_MOBILE = ((2, 5, 4), ("(", ") ", "-"))
_PHONE_MAX_DIGITS = 11
_PASSPORT_MAX_CHARS = 8


@dataclass(frozen=True)
class MaskedValue:
    text: str
    caret: int


def only_digits(value: Optional[str]) -> str:
    return re.sub(r"\D", "", value or "")


def _only_alphanumerics(value: Optional[str]) -> str:
    return re.sub(r"[^A-Z0-9]", "", (value or "").upper())


def _group(chars: str, sizes: Tuple[int, ...], separators: Tuple[str, ...]) -> str:
    out = []
    position = 0
    for size, separator in zip(sizes, separators):
        if position >= len(chars):
            break
        out.append(separator)
        out.append(chars[position : position + size])
        position += size
    return "".join(out)


def parse_number(value: Optional[str]) -> float:
    """Parses a loosely formatted pt-BR or plain number, returning 0.0 when empty."""

    cleaned = re.sub(r"[^\d,.]", "", value or "")
    if "," in cleaned:
        cleaned = cleaned.replace(".", "").replace(",", ".", 1)
    match = re.match(r"\d*\.?\d*", cleaned)
    try:
        return float(match.group(0)) if match else 0.0
    except ValueError:
        return 0.0


def format_decimal_pt_br(number: float) -> str:
    rendered = f"{number:,.2f}"
    return rendered.translate(str.maketrans({",": ".", ".": ","}))


def _mask_numeric(value: str, mask_type: MaskType) -> str:
    if not re.search(r"\d", value):
        return ""
    rendered = format_decimal_pt_br(parse_number(value))
    if mask_type is MaskType.CURRENCY:
        return f"R$ {rendered}"
    if mask_type is MaskType.PERCENT:
        return f"{rendered}%"
    return rendered


def apply_mask(raw: Optional[str], mask_type: MaskType | str) -> str:
    mask_type = MaskType(mask_type)
    if not raw:
        return ""

    if mask_type in NUMERIC_MASKS:
        return _mask_numeric(raw, mask_type)

    if mask_type is MaskType.PASSPORT:
        return _only_alphanumerics(raw)[:_PASSPORT_MAX_CHARS]

    digits = only_digits(raw)
    if mask_type is MaskType.PHONE:
        digits = digits[:_PHONE_MAX_DIGITS]
        sizes, separators = _PHONE_MOBILE if len(digits) > 10 else _PHONE_LANDLINE
        return _group(digits, sizes, separators)

    sizes, separators = _LAYOUTS[mask_type]
    return _group(digits[: sum(sizes)], sizes, separators)


def unmask(formatted: Optional[str], mask_type: MaskType | str) -> str:
    mask_type = MaskType(mask_type)
    if not formatted:
        return ""
    if mask_type in NUMERIC_MASKS:
        if not re.search(r"\d", formatted):
            return ""
        return f"{parse_number(formatted):.2f}"
    if mask_type in ALPHANUMERIC_MASKS:
        return _only_alphanumerics(formatted)
    return only_digits(formatted)


def _is_significant(char: str, mask_type: MaskType) -> bool:
    if mask_type in ALPHANUMERIC_MASKS:
        return char.isascii() and char.isalnum()
    return char.isdigit()


def reformat(value: Optional[str], caret: Optional[int], mask_type: MaskType | str) -> MaskedValue:
    """Masks ``value`` and moves the caret so it stays after the same character."""

    mask_type = MaskType(mask_type)
    value = value or ""
    text = apply_mask(value, mask_type)
    if caret is None:
        caret = len(value)
    caret = max(0, min(caret, len(value)))

    wanted = sum(1 for char in value[:caret] if _is_significant(char, mask_type))
    if wanted == 0:
        return MaskedValue(text, 0)

    seen = 0
    for index, char in enumerate(text):
        if _is_significant(char, mask_type):
            seen += 1
            if seen == wanted:
                return MaskedValue(text, index + 1)
    return MaskedValue(text, len(text))


@dataclass(frozen=True)
class Masker:
    """A mask bound to one field type, handed to the form orchestrator."""

    mask_type: MaskType

    def mask(self, value: Optional[str]) -> str:
        return apply_mask(value, self.mask_type)

    def unmask(self, value: Optional[str]) -> str:
        return unmask(value, self.mask_type)

    def reformat(self, value: Optional[str], caret: Optional[int] = None) -> MaskedValue:
        return reformat(value, caret, self.mask_type)


def mask_document(documento: str) -> str:
    """Hides most digits of a CPF/CNPJ before it reaches a log line."""

    if not documento:
        return documento
    digits = only_digits(documento)
    if len(digits) == 11:  # CPF
        return f"***.{digits[3:6]}.***-{digits[-2:]}"
    if len(digits) == 14:  # CNPJ
        return f"**.{digits[2:5]}.***/*{digits[8:12]}-{digits[-2:]}"
    if len(digits) >= 4:
        return f"{'*' * (len(digits) - 4)}{digits[-4:]}"
    return "***"
