"""
Extraction Engine — turns one utterance into field updates plus a reply.

    result = extract("My name is Alice Smith", record)
    record.apply_all(result.updates)
    reply = result.narrative

The engine is a pure function of the utterance, the current record and the
rule tables.  It never mutates the record and never raises: a field whose
rules all fail simply produces no update.

Extraction order is fixed:

  name → date_of_birth → age → gender → mobile → address → symptoms

A date of birth found in this utterance also writes ``age`` (overwriting any
previous value) and suppresses the age extractor, so the day, month or year
of a birth date can never be read back as an age.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field

from rune.intake import extractors
from rune.intake.record import (
    AddressUpdate,
    AgeUpdate,
    DateOfBirthUpdate,
    FieldUpdate,
    GenderUpdate,
    MobileUpdate,
    NameUpdate,
    PatientRecord,
    SymptomsUpdate,
    calculate_age,
)
from rune.intake.rules import ExtractionRules, default_rules

logger = logging.getLogger("rune.intake.engine")


# Human-friendly labels for the missing-field prompt
MISSING_FIELD_LABELS: dict[str, str] = {
    "name": "your name",
    "age_or_dob": "your age or date of birth",
    "gender": "your gender",
    "mobile": "your mobile number",
    "address": "your address",
}

EXTRACTED_PREFIX = "Great! I've extracted and updated the following information: "
NOTHING_EXTRACTED = (
    "I heard what you said, but couldn't extract specific form information from it. "
)
STILL_NEED = "I still need {missing}. Could you please provide this information?"
FORM_COMPLETE = (
    "Perfect! Your form is now complete. "
    "Is there anything else you'd like to add or modify?"
)


class ExtractionResult(BaseModel):
    """Everything one engine call produces."""

    updates: list[FieldUpdate] = Field(default_factory=list)
    narrative: str = ""
    extracted: list[str] = Field(default_factory=list)  # "name: Alice Smith", ...
    missing: list[str] = Field(default_factory=list)    # keys of MISSING_FIELD_LABELS

    def as_partial(self) -> dict[str, Any]:
        """Updates as a partial record (last write per field wins)."""
        return {u.field: u.value for u in self.updates}

    @property
    def updated_fields(self) -> list[str]:
        return [u.field for u in self.updates]


def _safe(field: str, fn: Callable[..., Any], *args: Any) -> Any:
    """Run one extractor; an unexpected error counts as "field absent"."""
    try:
        return fn(*args)
    except Exception:
        logger.exception("Extractor for %s failed, treating as no match", field)
        return None


def extract(
    utterance: Optional[str],
    current_record: Optional[PatientRecord] = None,
    rules: Optional[ExtractionRules] = None,
    today: Optional[date] = None,
) -> ExtractionResult:
    """Extract field updates from one utterance against the current record."""
    rules = rules or default_rules()
    today = today or date.today()
    record = current_record if current_record is not None else PatientRecord()
    text = utterance.strip() if isinstance(utterance, str) else ""

    updates: list[FieldUpdate] = []
    extracted: list[str] = []

    if text:
        if record.can_write("name"):
            name = _safe("name", extractors.extract_name, text, rules)
            if name:
                updates.append(NameUpdate(value=name))
                extracted.append(f"name: {name}")

        dob_fired = False
        if record.can_write("date_of_birth"):
            dob = _safe("date_of_birth", extractors.extract_date_of_birth, text, rules, today)
            if dob:
                age = calculate_age(dob, today)
                updates.append(DateOfBirthUpdate(value=dob))
                updates.append(AgeUpdate(value=age))
                extracted.append(f"date of birth: {dob.isoformat()} and age: {age}")
                dob_fired = True

        if not dob_fired and record.can_write("age"):
            age = _safe("age", extractors.extract_age, text, rules)
            if age is not None:
                updates.append(AgeUpdate(value=age))
                extracted.append(f"age: {age} years")

        if record.can_write("gender"):
            gender = _safe("gender", extractors.extract_gender, text, rules)
            if gender is not None:
                updates.append(GenderUpdate(value=gender))
                extracted.append(f"gender: {gender.value}")

        if record.can_write("mobile"):
            mobile = _safe("mobile", extractors.extract_mobile, text, rules)
            if mobile:
                updates.append(MobileUpdate(value=mobile))
                extracted.append(f"mobile: {mobile}")

        if record.can_write("address"):
            address = _safe("address", extractors.extract_address, text, rules)
            if address:
                updates.append(AddressUpdate(value=address))
                extracted.append(f"address: {address}")

        # Symptoms accumulate: never guarded, never overwritten
        fragment = _safe("symptoms", extractors.extract_symptoms, text, rules)
        if fragment:
            prior = record.symptoms
            combined = f"{prior}. {fragment}" if prior else fragment
            updates.append(SymptomsUpdate(value=combined))
            extracted.append(f"symptoms: {fragment}")

    projected = record.model_copy()
    projected.apply_all(updates)
    missing = projected.get_missing_required()

    if updates:
        logger.info("Extracted %s", ", ".join(u.field for u in updates))
    else:
        logger.debug("No fields extracted from utterance (%d chars)", len(text))

    return ExtractionResult(
        updates=updates,
        narrative=build_narrative(extracted, missing),
        extracted=extracted,
        missing=missing,
    )


def build_narrative(extracted: list[str], missing: list[str]) -> str:
    """Reply text: what was captured, then what is still needed."""
    if extracted:
        narrative = EXTRACTED_PREFIX + ", ".join(extracted) + ". "
    else:
        narrative = NOTHING_EXTRACTED

    if missing:
        labels = ", ".join(MISSING_FIELD_LABELS.get(m, m) for m in missing)
        return narrative + STILL_NEED.format(missing=labels)
    return narrative + FORM_COMPLETE
