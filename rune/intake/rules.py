"""
Extraction rule tables.

Every cue pattern, stop word, keyword and city the extractors use lives
here, grouped per field in priority order.  ``ExtractionRules`` is frozen
so one instance can be shared across sessions; build a variant with
``dataclasses.replace(rules, date_order="MDY")``.

Patterns marked "lowercase" are matched against the lowercased utterance,
the rest against the utterance as typed (some rely on capitalisation).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import cached_property, lru_cache
from re import Pattern

from rune import settings

DATE_ORDERS = ("DMY", "MDY")

# ── Name (as typed) ──

NAME_PATTERNS: tuple[Pattern[str], ...] = (
    # "my name is Alice Smith", "I'm Ravi and ...", "call me Sam."
    re.compile(
        r"\b(?:my name is|i'm|i am|call me|this is|name)(?:\s*:\s*|\s+)"
        r"([a-zA-Z][a-zA-Z\s]*?)"
        r"(?:\s+(?:(?:and|i am|i'm|my|age|years|born|gender|from|here)\b|\d)|$|\.|,)",
        re.IGNORECASE,
    ),
    # "Hello, Priya Sharma here"
    re.compile(
        r"(?:^|\bhello\b|\bhi\b)\s*,?\s*([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*?)"
        r"(?:\s+(?:(?:and|here|speaking|i am|i'm|my|age|years)\b|\d))",
        re.IGNORECASE,
    ),
    # "Ravi Kumar and I have a cough" (capitalisation matters)
    re.compile(
        r"(?:^|\s)([A-Z][a-z]+(?:\s+[A-Z][a-z]+){1,2})"
        r"(?:\s+(?:(?:and|i|my|age|years|born)\b|\d))"
    ),
)

# Speech artifacts removed before a name is validated ("room" is a common
# mis-transcription of the assistant's name).
NAME_FILLER_WORDS = frozenset({"hi", "hello", "room", "rune"})

# A candidate containing any of these is a sentence fragment, not a name.
NAME_STOP_WORDS = frozenset({
    "a", "an", "the", "not", "from", "in", "at", "with", "to", "of",
    "feeling", "having", "suffering", "living", "calling", "born",
    "years", "old", "here", "fine", "good", "okay", "ok", "well",
    "have", "has", "been", "very", "so", "just", "also", "really",
    "male", "female", "man", "woman", "boy", "girl",
    "my", "your", "and", "but", "or", "yes", "no", "please", "thanks",
    "thank", "sorry", "now", "since", "today", "yesterday", "yeah", "sure",
    "is", "am", "me", "call", "reach", "contact", "phone", "mobile",
    "number", "age", "address", "gender", "name", "there",
})

# ── Date of birth (lowercase) ──

_DOB_CUE = (
    r"(?:born(?:\s+on)?|birth(?:\s+(?:date|is))?|date of birth|\bdob)"
    r"(?:\s*:\s*|\s+)(?:is\s+)?"
)

DOB_PATTERNS: tuple[tuple[str, Pattern[str]], ...] = (
    # "born on 15/06/1990", "date of birth is 1-2-1985"
    ("numeric", re.compile(_DOB_CUE + r"(\d{1,2}[-/]\d{1,2}[-/]\d{4})\b")),
    # "born on the 15th of june 1990"
    ("day_month", re.compile(
        _DOB_CUE + r"(?:the\s+)?(\d{1,2})(?:st|nd|rd|th)?\s+(?:of\s+)?([a-z]+)\.?,?\s+(\d{4})\b"
    )),
    # "born on june 15, 1990"
    ("month_day", re.compile(
        _DOB_CUE + r"([a-z]+)\.?\s+(\d{1,2})(?:st|nd|rd|th)?,?\s+(\d{4})\b"
    )),
)

# ── Age (lowercase) ──

AGE_PATTERNS: tuple[Pattern[str], ...] = (
    re.compile(r"(?:\bi'm|\bi am|\bage(?:\s+is)?)\s+(\d+)(?:\s+years?\s+old)?"),
    re.compile(r"\b(\d+)\s+years?\s+old"),
    re.compile(r"\bage\s*:?\s*(\d+)"),
)

# ── Gender (lowercase) ──

GENDER_PATTERNS: tuple[Pattern[str], ...] = (
    re.compile(
        r"(?:\bgender(?:\s+is)?|\bi am|\bi'm)(?:\s*:\s*|\s+)(male|female|man|woman|boy|girl)\b"
    ),
    re.compile(r"(?:^|\s)(male|female|man|woman|boy|girl)(?=[\s.,!?;]|$)"),
)

# ── Mobile (as typed) ──

MOBILE_PATTERNS: tuple[Pattern[str], ...] = (
    # Cue + the whole digit run; the digit count is checked after capture
    re.compile(
        r"(?:mobile|phone|number|contact)(?:\s+(?:is|number))?\s*:?\s*([+(]?\d[\d()\s\-]*\d)",
        re.IGNORECASE,
    ),
    re.compile(r"(\d{3,4}[\s\-]?\d{3,4}[\s\-]?\d{3,4})"),
)

# ── Address (as typed) ──

_ADDRESS_STOP = r"(?:\s+(?:my|and|i|symptoms|mobile|phone)\b|[.!?]?$)"

ADDRESS_PATTERNS: tuple[Pattern[str], ...] = (
    # "address is 12 MG Road, Pune"
    re.compile(
        r"\baddress(?:\s+is)?(?:\s*:\s*|\s+)([a-zA-Z0-9\s,/#-]+?)" + _ADDRESS_STOP,
        re.IGNORECASE,
    ),
    # "I live in Gachibowli, Hyderabad", "I'm from Pune"
    re.compile(
        r"\b(?:live(?:\s+in)?|(?<!suffering\s)from)\s+([a-zA-Z\s,]+?)" + _ADDRESS_STOP,
        re.IGNORECASE,
    ),
)

DEFAULT_CITIES: tuple[str, ...] = (
    "gachibowli", "hyderabad", "bangalore", "mumbai",
    "delhi", "chennai", "kolkata", "pune",
)

# ── Symptoms (as typed) ──

SYMPTOM_PATTERNS: tuple[Pattern[str], ...] = (
    re.compile(
        r"\b(?:symptoms?(?:\s+are)?|suffering from|having|feel|feeling)(?:\s*:\s*|\s+)"
        r"(.+?)(?:\s+(?:and|my|i|mobile|phone|address)\b|$)",
        re.IGNORECASE,
    ),
)

SYMPTOM_KEYWORDS: tuple[str, ...] = (
    "pain", "hurt", "ache", "fever", "cough", "headache", "nausea", "dizzy",
    "tired", "sick", "cold", "flu", "sore throat", "stomach", "breathing",
    "fatigue", "weakness", "vomiting",
)


@dataclass(frozen=True)
class ExtractionRules:
    """All static rule data consumed by the extractors."""

    name_patterns: tuple[Pattern[str], ...] = NAME_PATTERNS
    name_filler_words: frozenset[str] = NAME_FILLER_WORDS
    name_stop_words: frozenset[str] = NAME_STOP_WORDS
    dob_patterns: tuple[tuple[str, Pattern[str]], ...] = DOB_PATTERNS
    age_patterns: tuple[Pattern[str], ...] = AGE_PATTERNS
    gender_patterns: tuple[Pattern[str], ...] = GENDER_PATTERNS
    mobile_patterns: tuple[Pattern[str], ...] = MOBILE_PATTERNS
    address_patterns: tuple[Pattern[str], ...] = ADDRESS_PATTERNS
    known_cities: tuple[str, ...] = DEFAULT_CITIES
    symptom_patterns: tuple[Pattern[str], ...] = SYMPTOM_PATTERNS
    symptom_keywords: tuple[str, ...] = SYMPTOM_KEYWORDS
    date_order: str = "DMY"

    def __post_init__(self) -> None:
        if self.date_order not in DATE_ORDERS:
            raise ValueError(
                f"date_order must be one of {DATE_ORDERS}, got {self.date_order!r}"
            )

    @cached_property
    def filler_pattern(self) -> Pattern[str]:
        words = "|".join(sorted(map(re.escape, self.name_filler_words)))
        return re.compile(rf"\b(?:{words})\b", re.IGNORECASE)

    @cached_property
    def city_pattern(self) -> Pattern[str] | None:
        if not self.known_cities:
            return None
        cities = "|".join(map(re.escape, self.known_cities))
        return re.compile(rf"\b({cities})\b", re.IGNORECASE)

    @cached_property
    def symptom_keyword_pattern(self) -> Pattern[str] | None:
        if not self.symptom_keywords:
            return None
        keywords = "|".join(map(re.escape, self.symptom_keywords))
        return re.compile(rf"(?:{keywords})", re.IGNORECASE)


@lru_cache(maxsize=1)
def default_rules() -> ExtractionRules:
    """Rules configured from settings (date order, city list override)."""
    return ExtractionRules(
        known_cities=tuple(settings.KNOWN_CITIES) or DEFAULT_CITIES,
        date_order=settings.DATE_ORDER,
    )
