"""
Unit tests for body composition lookup tables.

Tests the table helpers in muster.contexts.screening.tables.
"""

import pytest

from muster.contexts.screening.tables import (
    ALLOWABLE_BODY_FAT,
    TapeRow,
    allowable_body_fat_for,
    estimate_body_fat,
    screening_weight_for,
    table_gender,
    to_number,
)


class TestToNumber:
    """Tests for measurement coercion."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,expected", [(68, 68.0), (67.5, 67.5), ("175", 175.0), (" 34.5 ", 34.5)]
    )
    def test_accepts_numbers_and_numeric_strings(self, value, expected):
        assert to_number(value) == expected

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value", [None, "", "   ", "abc", True, False, float("nan"), float("inf"), [68]]
    )
    def test_rejects_non_numbers(self, value):
        assert to_number(value) is None


class TestTableGender:
    """Gender is a table selector only."""

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["female", "Female", " FEMALE "])
    def test_female_any_case(self, value):
        assert table_gender(value) == "female"

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["male", "other", "", None, 1])
    def test_everything_else_is_male(self, value):
        assert table_gender(value) == "male"


class TestScreeningWeight:
    """Tests for screening_weight_for."""

    @pytest.mark.unit
    def test_known_heights(self):
        assert screening_weight_for(68, "male") == 180
        assert screening_weight_for(70, "male") == 192
        assert screening_weight_for(64, "female") == 145

    @pytest.mark.unit
    def test_string_height(self):
        assert screening_weight_for("68", "male") == 180

    @pytest.mark.unit
    def test_rounds_half_up(self):
        assert screening_weight_for(67.5, "male") == 180
        assert screening_weight_for(67.4, "male") == 174

    @pytest.mark.unit
    @pytest.mark.parametrize("height", [59, 71, 80, None, "tall"])
    def test_missing_or_off_table(self, height):
        assert screening_weight_for(height, "male") is None


class TestAllowableBodyFat:
    """Tests for the age step function."""

    @pytest.mark.unit
    def test_breakpoints(self):
        assert allowable_body_fat_for(17, "male") == 20
        assert allowable_body_fat_for(20, "male") == 22
        assert allowable_body_fat_for(27, "male") == 22
        assert allowable_body_fat_for(28, "male") == 24
        assert allowable_body_fat_for(45, "male") == 26
        assert allowable_body_fat_for(30, "female") == 34

    @pytest.mark.unit
    def test_below_first_breakpoint_uses_first_value(self):
        assert allowable_body_fat_for(16, "male") == allowable_body_fat_for(17, "male")
        assert allowable_body_fat_for(None, "female") == 30

    @pytest.mark.unit
    @pytest.mark.parametrize("gender", sorted(ALLOWABLE_BODY_FAT))
    def test_non_decreasing_with_age(self, gender):
        values = [allowable_body_fat_for(age, gender) for age in range(10, 70)]
        assert values == sorted(values)


class TestEstimateBodyFat:
    """Tests for the circumference chart search."""

    @pytest.mark.unit
    def test_exact_row(self):
        assert estimate_body_fat({"neck": 16, "waist": 34}, "male") == 18

    @pytest.mark.unit
    def test_tolerance_is_inclusive(self):
        assert estimate_body_fat({"neck": 16.75, "waist": 35.5}, "male") == 18

    @pytest.mark.unit
    def test_no_match(self):
        assert estimate_body_fat({"neck": 20, "waist": 50}, "male") is None

    @pytest.mark.unit
    def test_missing_measurement_never_matches(self):
        assert estimate_body_fat({"neck": 16}, "male") is None

    @pytest.mark.unit
    def test_female_rows_need_hip(self):
        assert estimate_body_fat({"neck": 13, "waist": 29}, "female") is None
        assert estimate_body_fat({"neck": 13, "waist": 29, "hip": 38}, "female") == 24

    @pytest.mark.unit
    def test_first_matching_row_wins(self):
        """Table order decides between overlapping rows, not closeness."""
        first = TapeRow(neck=16.0, waist=34.0, body_fat=18)
        second = TapeRow(neck=16.5, waist=34.5, body_fat=25)
        candidate = {"neck": 16.4, "waist": 34.4}

        assert estimate_body_fat(candidate, "male", chart=(first, second)) == 18
        assert estimate_body_fat(candidate, "male", chart=(second, first)) == 25
