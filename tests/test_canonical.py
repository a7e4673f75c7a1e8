"""Tests for canonical identity keys."""

from kitchen.identity.canonical import (
    Canonicalizer,
    canonicalize,
    canonicalize_line,
    get_canonicalizer,
)
from kitchen.identity.text.normalizer import NormalizeMode
from kitchen.identity.text.vocab import DEFAULT_VOCABULARY, DisambiguationGuard


class TestCanonicalize:
    def test_strict_keeps_order(self):
        ident = canonicalize("Chicken Breast")
        assert ident.canonical_strict == "chicken breast"
        assert ident.canonical_loose == "breast chicken"
        assert ident.tokens == frozenset({"chicken", "breast"})

    def test_loose_ignores_order(self):
        a = canonicalize("chicken breast")
        b = canonicalize("breast chicken")
        assert a.canonical_loose == b.canonical_loose
        assert a.canonical_strict != b.canonical_strict

    def test_marks_and_punctuation(self):
        assert canonicalize("Heinz® Ketchup!").canonical_strict == "heinz ketchup"

    def test_stop_words(self):
        assert canonicalize("The Original Ketchup").canonical_strict == "ketchup"

    def test_display_name_kept(self):
        assert canonicalize("  Whole Milk ").display_name == "Whole Milk"

    def test_empty(self):
        ident = canonicalize("")
        assert ident.canonical_loose == ""
        assert ident.tokens == frozenset()

    def test_deterministic(self):
        assert canonicalize("Sour Cream") == canonicalize("Sour Cream")

    def test_to_dict_sorts_tokens(self):
        data = canonicalize("whole milk").to_dict()
        assert data["tokens"] == ["milk", "whole"]


class TestCandyEggs:
    def test_mini_eggs_never_match_eggs(self):
        candy = canonicalize_line("Cadbury Mini Eggs")
        eggs = canonicalize_line("2 eggs")
        assert candy.canonical_loose != eggs.canonical_loose
        assert "eggs" not in candy.tokens
        assert "mini_eggs" in candy.tokens

    def test_chocolate_eggs(self):
        ident = canonicalize("Chocolate Eggs")
        assert ident.tokens == frozenset({"chocolate_eggs"})

    def test_eggs_with_treat_word(self):
        ident = canonicalize("Easter eggs candy bag")
        assert "eggs" not in ident.tokens

    def test_plain_eggs_untouched(self):
        assert canonicalize("Large Eggs").tokens == frozenset({"large", "eggs"})


class TestCanonicalizeLine:
    def test_identity_mode_shared_key(self):
        a = canonicalize_line("2 cups shredded cheese", NormalizeMode.IDENTITY)
        b = canonicalize_line("cheese, shredded", NormalizeMode.IDENTITY)
        assert a.tokens == frozenset({"shredded", "cheese"})
        assert a.canonical_loose == b.canonical_loose

    def test_aggressive_mode_drops_prep_clause(self):
        ident = canonicalize_line("cheese, shredded", NormalizeMode.AGGRESSIVE)
        assert ident.canonical_loose == "cheese"

    def test_non_string(self):
        assert canonicalize_line(None).canonical_loose == ""


def test_custom_guard():
    guard = DisambiguationGuard(
        name="peanut_butter_cups",
        triggers=(r"\bpeanut\s+butter\s+cups?\b",),
        fusions=((r"\bpeanut\s+butter\s+cups?\b", "peanut_butter_cups"),),
        drop_tokens=frozenset({"butter"}),
    )
    canon = Canonicalizer(DEFAULT_VOCABULARY.extended(guards=[guard]))
    ident = canon.canonicalize("Reese Peanut Butter Cups")
    assert ident.tokens == frozenset({"reese", "peanut_butter_cups"})


def test_get_canonicalizer_is_shared():
    assert get_canonicalizer() is get_canonicalizer()
    assert get_canonicalizer().vocabulary is DEFAULT_VOCABULARY
