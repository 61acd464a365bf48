"""
Data validators for patient information.

Name shape, age range, date of birth parsing and range, mobile digit count,
address length.  Validators return ``None`` (or False) on rejection instead
of raising, so extractors can fall through to their next rule.
"""

from __future__ import annotations

import re
from datetime import date

from rune.intake.record import Gender

DOB_LOWER_BOUND = date(1900, 1, 1)

MIN_AGE_EXCLUSIVE = 0
MAX_AGE_EXCLUSIVE = 150

MIN_MOBILE_DIGITS = 8
MAX_MOBILE_DIGITS = 15

_NAME_CHARS = re.compile(r"^[a-zA-Z\s]+$")
_NON_DIGITS = re.compile(r"\D")

MONTHS: dict[str, int] = {
    "january": 1, "february": 2, "march": 3, "april": 4,
    "may": 5, "june": 6, "july": 7, "august": 8,
    "september": 9, "october": 10, "november": 11, "december": 12,
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "jun": 6, "jul": 7,
    "aug": 8, "sep": 9, "sept": 9, "oct": 10, "nov": 11, "dec": 12,
}

GENDER_ALIASES: dict[str, Gender] = {
    "male": Gender.MALE,
    "man": Gender.MALE,
    "boy": Gender.MALE,
    "female": Gender.FEMALE,
    "woman": Gender.FEMALE,
    "girl": Gender.FEMALE,
    "other": Gender.OTHER,
    "prefer-not-to-say": Gender.PREFER_NOT_TO_SAY,
    "prefer not to say": Gender.PREFER_NOT_TO_SAY,
}


def validate_name(name: str) -> bool:
    """2-50 characters, letters and spaces only."""
    return 2 <= len(name) <= 50 and bool(_NAME_CHARS.match(name))


def validate_age(value: int | str) -> int | None:
    """Return the age as an int when it lies strictly between 0 and 150."""
    try:
        age = int(value)
    except (TypeError, ValueError):
        return None
    if MIN_AGE_EXCLUSIVE < age < MAX_AGE_EXCLUSIVE:
        return age
    return None


def build_date(year: int, month: int, day: int) -> date | None:
    """A real calendar date, or None for impossible components (31/02)."""
    try:
        return date(year, month, day)
    except (TypeError, ValueError):
        return None


def parse_numeric_date(text: str, date_order: str = "DMY") -> date | None:
    """
    Parse ``D/M/YYYY`` or ``D-M-YYYY`` (or month-first when date_order is MDY).

    Ambiguous inputs such as 04/05/1990 are resolved purely by date_order.
    """
    parts = re.split(r"[-/]", text.strip())
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        return None
    first, second, year = (int(p) for p in parts)
    if date_order == "MDY":
        return build_date(year, first, second)
    return build_date(year, second, first)


def month_number(name: str) -> int | None:
    return MONTHS.get(name.strip().lower().rstrip("."))


def validate_dob(dob: date, today: date | None = None) -> bool:
    """Strictly after 1900-01-01 and strictly before today."""
    today = today or date.today()
    return DOB_LOWER_BOUND < dob < today


def normalize_mobile(raw: str) -> str | None:
    """Strip everything but digits; accept 8 to 15 of them."""
    digits = _NON_DIGITS.sub("", raw)
    if MIN_MOBILE_DIGITS <= len(digits) <= MAX_MOBILE_DIGITS:
        return digits
    return None


def validate_address(address: str) -> bool:
    return len(address.strip()) > 2


def normalize_gender(word: str) -> Gender | None:
    return GENDER_ALIASES.get(word.strip().lower())
