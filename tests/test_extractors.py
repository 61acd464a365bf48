"""
Tests for the per-field extractors.

Each extractor is exercised directly against its rule table: cue phrases,
fallback patterns, validation rejections and the first-match-wins rule.
"""

import dataclasses
from datetime import date

import pytest

from rune.intake.extractors import (
    clean_name,
    extract_address,
    extract_age,
    extract_date_of_birth,
    extract_gender,
    extract_mobile,
    extract_name,
    extract_symptoms,
)
from rune.intake.record import Gender
from rune.intake.rules import ExtractionRules


# ── Name ──


class TestNameExtraction:
    def test_my_name_is(self, rules):
        assert extract_name("My name is Alice Smith", rules) == "Alice Smith"

    def test_stops_at_connector(self, rules):
        assert extract_name("I'm Ravi Kumar and I am 34", rules) == "Ravi Kumar"

    def test_call_me_with_period(self, rules):
        assert extract_name("Please call me Sam.", rules) == "Sam"

    def test_greeting_then_name_here(self, rules):
        assert extract_name("Hello, Priya Sharma here", rules) == "Priya Sharma"

    def test_capitalised_words_before_connector(self, rules):
        assert extract_name("Ravi Kumar and my age is 30", rules) == "Ravi Kumar"

    def test_filler_words_removed(self, rules):
        assert extract_name("My name is Rune Ravi Kumar", rules) == "Ravi Kumar"

    def test_sentence_fragment_rejected(self, rules):
        assert extract_name("I'm feeling sick", rules) is None

    def test_symptom_word_rejected(self, rules):
        assert extract_name("Fever and cough since yesterday", rules) is None

    def test_no_cue(self, rules):
        assert extract_name("hello there", rules) is None

    def test_digits_never_in_name(self, rules):
        assert extract_name("I am 45 years old", rules) is None

    @pytest.mark.parametrize("text,expected", [
        ("My name is Thomas Paine", "Thomas Paine"),
        ("My name is Chinua Achebe", "Chinua Achebe"),
        ("My name is Sarah Coldwell", "Sarah Coldwell"),
    ])
    def test_surname_containing_symptom_word(self, rules, text, expected):
        assert extract_name(text, rules) == expected

    def test_clean_name_collapses_spaces(self, rules):
        assert clean_name("  hi   Alice   Smith ", rules) == "Alice Smith"


# ── Date of birth ──


class TestDateOfBirthExtraction:
    def test_numeric_day_first(self, rules, today):
        assert extract_date_of_birth("I was born on 15/06/1990", rules, today) == date(1990, 6, 15)

    def test_date_of_birth_is(self, rules, today):
        assert extract_date_of_birth("My date of birth is 1-2-1985", rules, today) == date(1985, 2, 1)

    def test_dob_abbreviation(self, rules, today):
        assert extract_date_of_birth("DOB: 03/04/1970", rules, today) == date(1970, 4, 3)

    def test_month_first_configuration(self, rules, today):
        mdy = dataclasses.replace(rules, date_order="MDY")
        assert extract_date_of_birth("born on 06/15/1990", mdy, today) == date(1990, 6, 15)

    def test_month_first_input_rejected_when_day_first(self, rules, today):
        assert extract_date_of_birth("born on 06/15/1990", rules, today) is None

    def test_day_month_name(self, rules, today):
        text = "I was born on the 15th of June 1990"
        assert extract_date_of_birth(text, rules, today) == date(1990, 6, 15)

    def test_month_name_day(self, rules, today):
        text = "I was born on June 15, 1990"
        assert extract_date_of_birth(text, rules, today) == date(1990, 6, 15)

    def test_invalid_calendar_date_ignored(self, rules, today):
        assert extract_date_of_birth("my date of birth is 31/02/1990", rules, today) is None

    def test_lower_bound_exclusive(self, rules, today):
        assert extract_date_of_birth("born on 01/01/1900", rules, today) is None

    def test_future_date_rejected(self, rules, today):
        assert extract_date_of_birth("born on 01/01/2030", rules, today) is None

    def test_requires_cue(self, rules, today):
        assert extract_date_of_birth("15/06/1990", rules, today) is None

    def test_invalid_date_order_rejected(self):
        with pytest.raises(ValueError):
            ExtractionRules(date_order="YMD")


# ── Age ──


class TestAgeExtraction:
    def test_i_am_n_years_old(self, rules):
        assert extract_age("I am 45 years old", rules) == 45

    def test_age_colon(self, rules):
        assert extract_age("age: 30", rules) == 30

    def test_bare_years_old(self, rules):
        assert extract_age("He is 72 years old", rules) == 72

    @pytest.mark.parametrize("text", ["I am 0 years old", "I am 150 years old"])
    def test_boundaries_exclusive(self, rules, text):
        assert extract_age(text, rules) is None

    def test_no_number(self, rules):
        assert extract_age("I am old", rules) is None


# ── Gender ──


class TestGenderExtraction:
    def test_cue_word(self, rules):
        assert extract_gender("gender: male", rules) == Gender.MALE

    def test_bare_word_with_article(self, rules):
        assert extract_gender("I am a woman.", rules) == Gender.FEMALE

    def test_boy_normalised(self, rules):
        assert extract_gender("I'm a boy", rules) == Gender.MALE

    def test_girl_normalised(self, rules):
        assert extract_gender("she is a girl", rules) == Gender.FEMALE

    def test_word_prefix_not_matched(self, rules):
        assert extract_gender("I am manish", rules) is None

    def test_female_not_read_as_male(self, rules):
        assert extract_gender("female", rules) == Gender.FEMALE


# ── Mobile ──


class TestMobileExtraction:
    def test_cue_with_spaces(self, rules):
        assert extract_mobile("My mobile number is 98765 43210", rules) == "9876543210"

    def test_bare_grouped_digits(self, rules):
        assert extract_mobile("Reach me at 987-654-3210", rules) == "9876543210"

    def test_too_few_digits(self, rules):
        assert extract_mobile("call 12345", rules) is None

    def test_short_number_after_cue(self, rules):
        assert extract_mobile("my number is 123456", rules) is None

    def test_spaced_international_number_kept_whole(self, rules):
        assert extract_mobile("my number is +91 987 654 3210", rules) == "919876543210"

    def test_run_stops_at_words(self, rules):
        text = "my number is 98765 43210 and I live in Pune"
        assert extract_mobile(text, rules) == "9876543210"

    def test_date_not_read_as_mobile(self, rules):
        assert extract_mobile("born on 15/06/1990", rules) is None


# ── Address ──


class TestAddressExtraction:
    def test_live_in(self, rules):
        assert extract_address("I live in Gachibowli, Hyderabad", rules) == "Gachibowli, Hyderabad"

    def test_from_stops_at_connector(self, rules):
        assert extract_address("I'm from Pune and my number is 9876543210", rules) == "Pune"

    def test_address_is_with_digits(self, rules):
        assert extract_address("My address is 12 MG Road, Pune.", rules) == "12 MG Road, Pune"

    def test_suffering_from_is_not_an_address(self, rules):
        assert extract_address("I am suffering from fever", rules) is None

    def test_known_city_fallback(self, rules):
        assert extract_address("I was in Mumbai last week", rules) == "Mumbai"

    def test_custom_city_list(self, rules):
        custom = dataclasses.replace(rules, known_cities=("leeds",))
        assert extract_address("I was in Leeds last week", custom) == "Leeds"
        assert extract_address("I was in Mumbai last week", custom) is None


# ── Symptoms ──


class TestSymptomExtraction:
    def test_keyword_takes_whole_utterance(self, rules):
        assert extract_symptoms("I have fever and headache", rules) == "I have fever and headache"

    def test_suffering_from(self, rules):
        assert extract_symptoms("I am suffering from fever", rules) == "fever"

    def test_feeling(self, rules):
        assert extract_symptoms("I've been feeling dizzy since morning", rules) == "dizzy since morning"

    def test_symptoms_are(self, rules):
        assert extract_symptoms("My symptoms are a persistent cough", rules) == "a persistent cough"

    @pytest.mark.parametrize("text", ["I have a backache", "I have a toothache"])
    def test_keyword_inside_word(self, rules, text):
        assert extract_symptoms(text, rules) == text

    def test_nothing(self, rules):
        assert extract_symptoms("hello there", rules) is None
