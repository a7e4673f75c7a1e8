"""Tests for ingredient list cleanup."""

import pytest

from kitchen.identity.text.cleanup import clean_ingredient_lines, to_kitchen_fraction


class TestCleanIngredientLines:
    def test_text_input(self):
        text = "- 0.3333 cup butter\n• 1.5 cups flour\n\n1.5 cups Flour"
        assert clean_ingredient_lines(text) == ["1/3 cup butter", "1 1/2 cups flour"]

    def test_list_input(self):
        assert clean_ingredient_lines(["salt", "  Salt ", "pepper"]) == ["salt", "pepper"]

    def test_whitespace_collapsed(self):
        assert clean_ingredient_lines("2   cups    sugar") == ["2 cups sugar"]

    def test_decimal_without_unit_kept(self):
        assert clean_ingredient_lines("2.5 apples") == ["2.5 apples"]

    def test_empty(self):
        assert clean_ingredient_lines("") == []
        assert clean_ingredient_lines(None) == []


class TestToKitchenFraction:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (0.5, "1/2"),
            (0.25, "1/4"),
            (0.3333, "1/3"),
            (1.5, "1 1/2"),
            (2.0, "2"),
            (0.0625, "1/16"),
        ],
    )
    def test_fractions(self, value, expected):
        assert to_kitchen_fraction(value) == expected

    def test_not_positive(self):
        assert to_kitchen_fraction(0) is None
        assert to_kitchen_fraction(-1.5) is None
