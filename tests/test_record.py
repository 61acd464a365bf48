"""
Tests for the PatientRecord model.

Covers:
  - Calendar-aware age calculation
  - Filled checks per value type
  - Write guard (accumulating vs set-once fields)
  - Missing-field order and the combined age/DOB item
  - Completion percentage
  - Tagged FieldUpdate parsing
"""

from datetime import date

import pytest
from pydantic import TypeAdapter, ValidationError

from rune.intake.record import (
    AgeUpdate,
    DateOfBirthUpdate,
    FieldUpdate,
    Gender,
    GenderUpdate,
    NameUpdate,
    PatientRecord,
    calculate_age,
)


class TestCalculateAge:
    def test_birthday_later_in_year(self):
        assert calculate_age(date(1990, 6, 15), date(2024, 1, 1)) == 33

    def test_birthday_today(self):
        assert calculate_age(date(1990, 1, 1), date(2024, 1, 1)) == 34

    def test_birthday_tomorrow(self):
        assert calculate_age(date(1990, 1, 2), date(2024, 1, 1)) == 33

    def test_leap_day(self):
        assert calculate_age(date(2000, 2, 29), date(2024, 2, 28)) == 23
        assert calculate_age(date(2000, 2, 29), date(2024, 2, 29)) == 24


class TestFilledChecks:
    def test_empty_record(self, record):
        assert record.filled_fields() == set()

    def test_blank_string_not_filled(self):
        rec = PatientRecord(name="   ")
        assert rec.is_filled("name") is False

    def test_date_is_filled(self):
        rec = PatientRecord(date_of_birth=date(1990, 6, 15))
        assert rec.is_filled("date_of_birth") is True

    def test_enum_is_filled(self):
        rec = PatientRecord(gender=Gender.OTHER)
        assert rec.is_filled("gender") is True

    def test_age_is_filled(self):
        rec = PatientRecord(age=45)
        assert "age" in rec.filled_fields()


class TestWriteGuard:
    def test_empty_field_writable(self, record):
        assert record.can_write("name") is True

    def test_filled_field_not_writable(self):
        rec = PatientRecord(name="Alice Smith")
        assert rec.can_write("name") is False

    def test_symptoms_always_writable(self):
        rec = PatientRecord(symptoms="fever")
        assert rec.can_write("symptoms") is True


class TestMissingFields:
    def test_all_missing_in_order(self, record):
        assert record.get_missing_required() == [
            "name", "age_or_dob", "gender", "mobile", "address",
        ]

    def test_dob_satisfies_age_item(self):
        rec = PatientRecord(date_of_birth=date(1990, 6, 15))
        assert "age_or_dob" not in rec.get_missing_required()

    def test_age_satisfies_age_item(self):
        rec = PatientRecord(age=30)
        assert "age_or_dob" not in rec.get_missing_required()

    def test_symptoms_never_required(self):
        rec = PatientRecord(
            name="Alice", age=30, gender=Gender.FEMALE,
            mobile="9876543210", address="Pune",
        )
        assert rec.is_complete() is True
        assert rec.symptoms is None


class TestCompletion:
    def test_zero(self, record):
        assert record.completion_percent() == 0.0

    def test_all_seven(self):
        rec = PatientRecord(
            name="Alice", age=30, date_of_birth=date(1990, 6, 15),
            gender=Gender.FEMALE, mobile="9876543210", address="Pune",
            symptoms="cough",
        )
        assert rec.completion_percent() == 100.0

    def test_partial(self):
        rec = PatientRecord(name="Alice", age=30)
        assert rec.completion_percent() == pytest.approx(200 / 7)


class TestFieldUpdates:
    def test_parse_by_tag(self):
        update = TypeAdapter(FieldUpdate).validate_python({"field": "age", "value": "45"})
        assert isinstance(update, AgeUpdate)
        assert update.value == 45

    def test_parse_date(self):
        update = TypeAdapter(FieldUpdate).validate_python(
            {"field": "date_of_birth", "value": "1990-06-15"}
        )
        assert isinstance(update, DateOfBirthUpdate)
        assert update.value == date(1990, 6, 15)

    def test_unknown_tag_rejected(self):
        with pytest.raises(ValidationError):
            TypeAdapter(FieldUpdate).validate_python({"field": "email", "value": "x"})

    def test_bad_gender_rejected(self):
        with pytest.raises(ValidationError):
            GenderUpdate(value="robot")

    def test_apply_all(self, record):
        record.apply_all([NameUpdate(value="Alice"), GenderUpdate(value=Gender.FEMALE)])
        assert record.name == "Alice"
        assert record.gender == Gender.FEMALE
