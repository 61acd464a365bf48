"""
Patient Record — the cumulative target of extraction.

One record per intake session.  The extraction engine never writes to it
directly: it returns ``FieldUpdate`` variants which the caller applies with
``PatientRecord.apply()``.  Whether a field may still be written is decided
by the explicit ``FILLED_CHECKS`` mapping rather than by ad hoc truthiness,
so dates, enums, integers and strings are treated uniformly.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Annotated, Any, Callable, ClassVar, Literal, Optional, Union

from pydantic import BaseModel, Field


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Enums
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    PREFER_NOT_TO_SAY = "prefer-not-to-say"


# Form fields in display order.  Symptoms is a form field but never required.
FORM_FIELDS: tuple[str, ...] = (
    "name",
    "age",
    "date_of_birth",
    "gender",
    "mobile",
    "address",
    "symptoms",
)

# Fields every extractor may append to instead of guarding.
ACCUMULATING_FIELDS = frozenset({"symptoms"})


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Filled checks
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def _text_filled(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _value_present(value: Any) -> bool:
    return value is not None


FILLED_CHECKS: dict[str, Callable[[Any], bool]] = {
    "name": _text_filled,
    "age": _value_present,
    "date_of_birth": _value_present,
    "gender": _value_present,
    "mobile": _text_filled,
    "address": _text_filled,
    "symptoms": _text_filled,
}


def calculate_age(dob: date, today: date | None = None) -> int:
    """Whole years between ``dob`` and ``today``, one less before the birthday."""
    today = today or date.today()
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return age


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Field updates (tagged by ``field``)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class NameUpdate(BaseModel):
    field: Literal["name"] = "name"
    value: str


class AgeUpdate(BaseModel):
    field: Literal["age"] = "age"
    value: int


class DateOfBirthUpdate(BaseModel):
    field: Literal["date_of_birth"] = "date_of_birth"
    value: date


class GenderUpdate(BaseModel):
    field: Literal["gender"] = "gender"
    value: Gender


class MobileUpdate(BaseModel):
    field: Literal["mobile"] = "mobile"
    value: str


class AddressUpdate(BaseModel):
    field: Literal["address"] = "address"
    value: str


class SymptomsUpdate(BaseModel):
    """Carries the full accumulated symptom text, not just the new fragment."""

    field: Literal["symptoms"] = "symptoms"
    value: str


FieldUpdate = Annotated[
    Union[
        NameUpdate,
        AgeUpdate,
        DateOfBirthUpdate,
        GenderUpdate,
        MobileUpdate,
        AddressUpdate,
        SymptomsUpdate,
    ],
    Field(discriminator="field"),
]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Record
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class PatientRecord(BaseModel):
    name: Optional[str] = None
    age: Optional[int] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    mobile: Optional[str] = None
    address: Optional[str] = None
    symptoms: Optional[str] = None

    # Missing-field prompt order.  "age_or_dob" is satisfied by either field.
    REQUIRED_FIELDS: ClassVar[list[str]] = [
        "name", "age_or_dob", "gender", "mobile", "address",
    ]

    def is_filled(self, field: str) -> bool:
        return FILLED_CHECKS[field](getattr(self, field))

    def can_write(self, field: str) -> bool:
        """Write guard: accumulating fields always, others only while empty."""
        if field in ACCUMULATING_FIELDS:
            return True
        return not self.is_filled(field)

    def filled_fields(self) -> set[str]:
        return {f for f in FORM_FIELDS if self.is_filled(f)}

    def completion_percent(self) -> float:
        return 100.0 * len(self.filled_fields()) / len(FORM_FIELDS)

    def get_missing_required(self) -> list[str]:
        missing = []
        for field in self.REQUIRED_FIELDS:
            if field == "age_or_dob":
                if not (self.is_filled("age") or self.is_filled("date_of_birth")):
                    missing.append(field)
            elif not self.is_filled(field):
                missing.append(field)
        return missing

    def is_complete(self) -> bool:
        return len(self.get_missing_required()) == 0

    def apply(self, update: FieldUpdate) -> None:
        setattr(self, update.field, update.value)

    def apply_all(self, updates: list[FieldUpdate]) -> None:
        for update in updates:
            self.apply(update)
