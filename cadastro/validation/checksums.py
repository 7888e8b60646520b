"""Mod-11 check digit verification for CPF and CNPJ numbers."""

from __future__ import annotations

import re
from typing import Any, Optional, Tuple

from cadastro.common.errors import ErrorKind

CPF_LENGTH = 11
CNPJ_LENGTH = 14


def _digits(raw: Any) -> str:
    if not isinstance(raw, str):
        return ""
    return re.sub(r"\D", "", raw)


def _all_same(digits: str) -> bool:
    return len(set(digits)) == 1


def _cpf_digit(base: str) -> int:
    weight = len(base) + 1
    total = sum(int(digit) * (weight - index) for index, digit in enumerate(base))
    remainder = 11 - (total % 11)
    return 0 if remainder in (10, 11) else remainder


def _cnpj_digit(base: str) -> int:
    total = 0
    weight = 2
    for digit in reversed(base):
        total += int(digit) * weight
        weight = 2 if weight == 9 else weight + 1
    remainder = total % 11
    return 0 if remainder < 2 else 11 - remainder


def cpf_check_digits(base: str) -> Tuple[int, int]:
    """Check digits for the first nine digits of a CPF."""

    first = _cpf_digit(base[:9])
    second = _cpf_digit(base[:9] + str(first))
    return first, second


def cnpj_check_digits(base: str) -> Tuple[int, int]:
    """Check digits for the first twelve digits of a CNPJ."""

    first = _cnpj_digit(base[:12])
    second = _cnpj_digit(base[:12] + str(first))
    return first, second


def is_valid_cpf(raw: Any) -> bool:
    digits = _digits(raw)
    if len(digits) != CPF_LENGTH or _all_same(digits):
        return False
    first, second = cpf_check_digits(digits)
    return digits[9:] == f"{first}{second}"


def is_valid_cnpj(raw: Any) -> bool:
    digits = _digits(raw)
    if len(digits) != CNPJ_LENGTH or _all_same(digits):
        return False
    first, second = cnpj_check_digits(digits)
    return digits[12:] == f"{first}{second}"


def classify_document(raw: Any, kind: str) -> Optional[ErrorKind]:
    """Returns ``None`` for a valid number, otherwise the kind of failure.

    A number with the right length whose digits are not all equal but whose
    verifiers do not match is a checksum failure; anything else is malformed.
    """

    if kind == "cpf":
        length, check = CPF_LENGTH, is_valid_cpf
    elif kind == "cnpj":
        length, check = CNPJ_LENGTH, is_valid_cnpj
    else:
        raise ValueError(f"Tipo de documento desconhecido: {kind}")

    if check(raw):
        return None
    digits = _digits(raw)
    if len(digits) == length and not _all_same(digits):
        return ErrorKind.CHECKSUM_FAILURE
    return ErrorKind.INVALID_FORMAT
