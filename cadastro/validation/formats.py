"""Pure format predicates for registration fields.

Every predicate trims its input and treats the empty string as valid, since
whether a field may be left blank is decided by the ``required`` rule.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Optional

EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
CEP_RE = re.compile(r"^\d{5}-?\d{3}$")
DATE_RE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")
PASSPORT_RE = re.compile(r"^[A-Z]{2}[0-9]{6}$")
NAME_RE = re.compile(r"^[A-Za-zÀ-ÖØ-öø-ÿ .'\-]+$")
REPEATED_PUNCTUATION_RE = re.compile(r"-{2,}|\.{2,}|'{2,}")

MINIMUM_AGE = 18

DOCUMENT_TYPES = ["RG", "CNH", "Passaporte"]


def _digits(value: str) -> str:
    return re.sub(r"\D", "", value)


def is_valid_email(value: str) -> bool:
    value = value.strip()
    if not value:
        return True
    return bool(EMAIL_RE.match(value))


def is_valid_phone(value: str) -> bool:
    value = value.strip()
    if not value:
        return True
    return len(_digits(value)) in (10, 11)


def is_valid_cep(value: str) -> bool:
    value = value.strip()
    if not value:
        return True
    return bool(CEP_RE.match(value))


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def parse_date(value: str) -> Optional[date]:
    """Parses ``DD/MM/YYYY`` into a date, or ``None`` if it is not a real day."""

    match = DATE_RE.match(value.strip())
    if not match:
        return None
    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def is_valid_date(value: str) -> bool:
    if not value.strip():
        return True
    return parse_date(value) is not None


def age_on(birth: date, today: date) -> int:
    years = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        years -= 1
    return years


def is_adult(value: str, today: Optional[date] = None, min_age: int = MINIMUM_AGE) -> bool:
    birth = parse_date(value)
    if birth is None:
        return False
    return age_on(birth, today or date.today()) >= min_age


def is_valid_issuance_date(value: str, today: Optional[date] = None) -> bool:
    issued = parse_date(value)
    if issued is None:
        return False
    return issued <= (today or date.today())


def is_valid_document_number(value: str, doc_type: Optional[str]) -> bool:
    value = value.strip()
    if not value or not doc_type:
        return True
    if doc_type == "RG":
        return 8 <= len(_digits(value)) <= 10
    if doc_type == "CNH":
        return len(_digits(value)) == 11
    if doc_type == "Passaporte":
        return bool(PASSPORT_RE.match(re.sub(r"[.\-]", "", value).upper()))
    return True


def is_valid_name(value: str) -> bool:
    if not value.strip():
        return True
    if re.search(r"\d", value):
        return False
    if not NAME_RE.match(value):
        return False
    if value != value.strip():
        return False
    if "  " in value:
        return False
    return not REPEATED_PUNCTUATION_RE.search(value)
