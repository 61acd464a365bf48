"""
Per-field extractors.

Each extractor walks its field's rules in priority order and returns the
first candidate that both matches and validates, or ``None``.  Only the
first match of each pattern is considered; a rejected candidate moves on
to the next pattern, never to a later match of the same one.
"""

from __future__ import annotations

import logging
import re
from datetime import date

from rune.intake.record import Gender
from rune.intake.rules import ExtractionRules
from rune.intake.validators import (
    build_date,
    month_number,
    normalize_gender,
    normalize_mobile,
    parse_numeric_date,
    validate_address,
    validate_age,
    validate_dob,
    validate_name,
)

logger = logging.getLogger("rune.intake.extractors")

_WHITESPACE = re.compile(r"\s+")


def clean_name(raw: str, rules: ExtractionRules) -> str:
    """Drop greeting/filler words and collapse whitespace."""
    without_fillers = rules.filler_pattern.sub("", raw)
    return _WHITESPACE.sub(" ", without_fillers).strip()


def _looks_like_sentence(name: str, rules: ExtractionRules) -> bool:
    # Whole words only: "Paine" and "Achebe" are surnames, not symptoms
    words = set(name.lower().split())
    if words & rules.name_stop_words:
        return True
    return bool(words & set(rules.symptom_keywords))


def extract_name(text: str, rules: ExtractionRules) -> str | None:
    for pattern in rules.name_patterns:
        match = pattern.search(text)
        if not match or not match.group(1):
            continue
        name = clean_name(match.group(1), rules)
        if not validate_name(name):
            logger.debug("Name candidate rejected (shape): %r", name)
            continue
        if _looks_like_sentence(name, rules):
            logger.debug("Name candidate rejected (sentence words): %r", name)
            continue
        return name
    return None


def _dob_from_match(kind: str, match: re.Match, date_order: str) -> date | None:
    if kind == "numeric":
        return parse_numeric_date(match.group(1), date_order)
    if kind == "day_month":
        day, month_name, year = match.groups()
        month = month_number(month_name)
        return build_date(int(year), month, int(day)) if month else None
    if kind == "month_day":
        month_name, day, year = match.groups()
        month = month_number(month_name)
        return build_date(int(year), month, int(day)) if month else None
    logger.warning("Unknown date-of-birth rule kind: %s", kind)
    return None


def extract_date_of_birth(
    text: str, rules: ExtractionRules, today: date | None = None
) -> date | None:
    lowered = text.lower()
    for kind, pattern in rules.dob_patterns:
        match = pattern.search(lowered)
        if not match:
            continue
        dob = _dob_from_match(kind, match, rules.date_order)
        if dob is None:
            logger.debug("Date of birth unparseable: %r", match.group(0))
            continue
        if not validate_dob(dob, today):
            logger.debug("Date of birth out of range: %s", dob)
            continue
        return dob
    return None


def extract_age(text: str, rules: ExtractionRules) -> int | None:
    lowered = text.lower()
    for pattern in rules.age_patterns:
        match = pattern.search(lowered)
        if not match or not match.group(1):
            continue
        age = validate_age(match.group(1))
        if age is None:
            logger.debug("Age candidate out of range: %s", match.group(1))
            continue
        return age
    return None


def extract_gender(text: str, rules: ExtractionRules) -> Gender | None:
    lowered = text.lower()
    for pattern in rules.gender_patterns:
        match = pattern.search(lowered)
        if match and match.group(1):
            gender = normalize_gender(match.group(1))
            if gender is not None:
                return gender
    return None


def extract_mobile(text: str, rules: ExtractionRules) -> str | None:
    for pattern in rules.mobile_patterns:
        match = pattern.search(text)
        if not match or not match.group(1):
            continue
        digits = normalize_mobile(match.group(1).strip())
        if digits is None:
            logger.debug("Mobile candidate has wrong digit count: %r", match.group(1))
            continue
        return digits
    return None


def extract_address(text: str, rules: ExtractionRules) -> str | None:
    for pattern in rules.address_patterns:
        match = pattern.search(text)
        if not match or not match.group(1):
            continue
        address = match.group(1).strip().strip(",").strip()
        if validate_address(address):
            return address

    # Fall back to a bare mention of a known city
    city_pattern = rules.city_pattern
    if city_pattern is not None:
        match = city_pattern.search(text)
        if match:
            return match.group(1)
    return None


def extract_symptoms(text: str, rules: ExtractionRules) -> str | None:
    """The new symptom fragment from this utterance (not the accumulated text)."""
    for pattern in rules.symptom_patterns:
        match = pattern.search(text)
        if match and match.group(1):
            fragment = match.group(1).strip().rstrip(".")
            if fragment.strip():
                return fragment.strip()

    keywords = rules.symptom_keyword_pattern
    if keywords is not None and keywords.search(text):
        return text.strip()
    return None
