"""Tests for reference range selection and classification."""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from django_lab_orders.ranges import (
    HIGH,
    LOW,
    NORMAL,
    UNCHECKED,
    classify,
    classify_value,
    matches,
    parse_numeric,
    select_reference_range,
)


def make_range(gender="Both", min_age=None, max_age=None, min_val=None, max_val=None, label=""):
    return SimpleNamespace(
        gender=gender,
        min_age=min_age,
        max_age=max_age,
        min_val=None if min_val is None else Decimal(min_val),
        max_val=None if max_val is None else Decimal(max_val),
        label=label,
    )


class TestParseNumeric:
    """Tests for parse_numeric."""

    @pytest.mark.parametrize("value,expected", [
        ("12.5", Decimal("12.5")),
        (" 7 ", Decimal("7")),
        ("-3", Decimal("-3")),
        (4, Decimal("4")),
    ])
    def test_numeric_values(self, value, expected):
        assert parse_numeric(value) == expected

    @pytest.mark.parametrize("value", [None, "", "   ", "Positive", "12 mg", "NaN", "Infinity", "1_000"])
    def test_non_numeric_values(self, value):
        assert parse_numeric(value) is None


class TestMatches:
    """Tests for range applicability."""

    def test_both_matches_any_gender(self):
        assert matches(make_range(gender="Both"), 30, "Female") is True

    def test_gender_mismatch_excluded(self):
        assert matches(make_range(gender="Male"), 30, "Female") is False

    def test_gender_is_case_insensitive(self):
        assert matches(make_range(gender="male"), 30, "MALE") is True

    def test_unknown_patient_gender_does_not_exclude(self):
        assert matches(make_range(gender="Male"), 30, None) is True

    def test_age_outside_bounds_excluded(self):
        child = make_range(min_age=0, max_age=12)
        assert matches(child, 13, "Male") is False
        assert matches(child, 12, "Male") is True

    def test_unknown_age_does_not_exclude(self):
        assert matches(make_range(min_age=18, max_age=60), None, "Male") is True


class TestSelectReferenceRange:
    """Tests for best range selection."""

    def test_exact_gender_beats_both(self):
        both = make_range(gender="Both", label="both")
        male = make_range(gender="Male", label="male")
        assert select_reference_range([both, male], 30, "Male").label == "male"

    def test_smallest_min_age_wins(self):
        adult = make_range(min_age=18, label="adult")
        teen = make_range(min_age=12, label="teen")
        assert select_reference_range([adult, teen], 20, "Male").label == "teen"

    def test_missing_min_age_sorts_last(self):
        open_range = make_range(label="open")
        adult = make_range(min_age=18, label="adult")
        assert select_reference_range([open_range, adult], 30, "Male").label == "adult"

    def test_full_tie_keeps_input_order(self):
        first = make_range(label="first")
        second = make_range(label="second")
        assert select_reference_range([first, second], 30, "Male").label == "first"

    def test_no_candidate_returns_none(self):
        assert select_reference_range([make_range(gender="Female")], 30, "Male") is None


class TestClassify:
    """Tests for classify and classify_value."""

    def test_low_high_normal(self):
        low, high = Decimal("10"), Decimal("20")
        assert classify(Decimal("9.9"), low, high).remarks == LOW
        assert classify(Decimal("20.1"), low, high).remarks == HIGH
        assert classify(Decimal("15"), low, high).remarks == NORMAL
        assert classify(Decimal("15"), low, high).is_abnormal is False

    def test_bounds_are_inclusive(self):
        assert classify(Decimal("10"), Decimal("10"), Decimal("20")).remarks == NORMAL
        assert classify(Decimal("20"), Decimal("10"), Decimal("20")).remarks == NORMAL

    def test_missing_bound_is_not_checked(self):
        assert classify(Decimal("1000"), Decimal("10"), None).remarks == NORMAL
        assert classify(Decimal("-5"), None, Decimal("20")).remarks == NORMAL

    def test_non_numeric_value_is_unchecked(self):
        ranges = [make_range(min_val="1", max_val="2")]
        assert classify_value("Reactive", ranges, 30, "Male") == UNCHECKED

    def test_matching_range_used(self):
        ranges = [make_range(gender="Male", min_val="13.5", max_val="17.5")]
        outcome = classify_value("12", ranges, 30, "Male")
        assert outcome.is_abnormal is True
        assert outcome.remarks == LOW

    def test_no_matching_range_is_unchecked(self):
        ranges = [make_range(gender="Female", min_val="12", max_val="15.5")]
        assert classify_value("99", ranges, 30, "Male") == UNCHECKED

    def test_default_bounds_without_ranges(self):
        outcome = classify_value("9", [], 30, "Male", Decimal("3.9"), Decimal("7.8"))
        assert outcome.remarks == HIGH

    def test_digit_group_underscores_are_not_numeric(self):
        outcome = classify_value("1_000", [], 30, "Male", Decimal("1"), Decimal("10"))
        assert outcome == UNCHECKED

    def test_no_ranges_and_no_defaults_is_unchecked(self):
        assert classify_value("9", [], 30, "Male") == UNCHECKED
