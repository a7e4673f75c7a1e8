"""Tests for substitute suggestions and pantry coverage."""

import pytest

from kitchen.identity.matching import MatchIndex
from kitchen.identity.substitutes import suggest_substitutes, summarize_coverage


class TestSuggestSubstitutes:
    def test_shared_tokens(self):
        subs = suggest_substitutes(
            "heavy cream", ["whipping cream", "sour cream", "butter"]
        )
        assert subs == ["whipping cream", "sour cream"]

    def test_ranked_by_overlap(self):
        subs = suggest_substitutes(
            "sharp cheddar cheese", ["cream cheese", "white cheddar cheese"]
        )
        assert subs == ["white cheddar cheese", "cream cheese"]

    def test_limit(self):
        subs = suggest_substitutes(
            "cheese", ["cheese a", "cheese b", "cheese c", "cheese d"], limit=2
        )
        assert subs == ["cheese a", "cheese b"]

    def test_original_casing(self):
        assert suggest_substitutes("milk", ["Oat Milk"]) == ["Oat Milk"]

    def test_quantities_ignored(self):
        assert suggest_substitutes("1 cup milk", ["2 L Milk"]) == ["2 L Milk"]

    def test_no_overlap(self):
        assert suggest_substitutes("saffron", ["salt", "pepper"]) == []

    def test_empty_missing(self):
        assert suggest_substitutes("", ["salt"]) == []

    def test_candy_eggs_never_substitute_eggs(self):
        assert suggest_substitutes("eggs", ["Cadbury Mini Eggs"]) == []


class TestCoverage:
    @pytest.fixture
    def index(self):
        return MatchIndex.build([
            {"id": 1, "name": "Large Eggs"},
            {"id": 2, "name": "Whole Milk"},
            {"id": 3, "name": "Sour Cream"},
        ])

    def test_summary(self, index):
        summary = summarize_coverage(
            ["2 eggs", "1 cup heavy cream", "1 cup whole milk"], index
        )
        assert summary.total == 3
        assert summary.have_count == 2
        assert summary.missing == ["1 cup heavy cream"]
        assert summary.substitutions == {"1 cup heavy cream": ["Sour Cream"]}
        assert summary.percent == 67
        assert not summary.all_in_stock

    def test_all_in_stock(self, index):
        summary = summarize_coverage(["eggs", "whole milk"], index)
        assert summary.all_in_stock
        assert summary.to_dict()["percent"] == 100

    def test_blank_lines_skipped(self, index):
        summary = summarize_coverage(["", "   "], index)
        assert summary.total == 0
        assert summary.percent == 0
        assert not summary.all_in_stock
