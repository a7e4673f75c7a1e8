"""Collect recipe ingredient lines into derived shopping-list entries."""

from __future__ import annotations

from typing import Any, Iterable

from ..canonical import Canonicalizer, get_canonicalizer
from ..text.normalizer import NormalizeMode
from .models import BatchEntry

# Recipe fields that have held ingredient lists over time, most recent first
_INGREDIENT_FIELDS: tuple[str, ...] = (
    "ingredients",
    "ingredients_json",
    "ingredients_list",
    "ingredientsText",
    "ingredients_text",
)

# Keys used by ingredient objects for their text
_INGREDIENT_TEXT_KEYS: tuple[str, ...] = ("name", "ingredient", "text", "value", "label")


def normalized_key(name: str, canonicalizer: Canonicalizer | None = None) -> str:
    """Identity key used for ``ShoppingListItem.normalized_name``."""
    canon = canonicalizer or get_canonicalizer()
    return canon.canonicalize_line(name, NormalizeMode.IDENTITY).canonical_loose


def extract_ingredient_lines(recipe: dict[str, Any]) -> list[str]:
    """Pull ingredient lines out of a recipe record.

    The first populated field wins. Lists may hold strings or objects with
    a text field; strings are split on newlines.
    """
    for key in _INGREDIENT_FIELDS:
        value = recipe.get(key)
        if not value:
            continue

        if isinstance(value, list):
            out: list[str] = []
            for item in value:
                if isinstance(item, str):
                    text = item
                elif isinstance(item, dict):
                    text = next(
                        (
                            item[k]
                            for k in _INGREDIENT_TEXT_KEYS
                            if isinstance(item.get(k), str) and item[k].strip()
                        ),
                        "",
                    )
                else:
                    continue
                if text.strip():
                    out.append(text.strip())
            return out

        if isinstance(value, str):
            lines = [line.strip() for line in value.split("\n") if line.strip()]
            if lines:
                return lines

    return []


def build_batch(
    lines: Iterable[str | tuple[str, str | None]],
    canonicalizer: Canonicalizer | None = None,
) -> list[BatchEntry]:
    """Turn raw ingredient lines into one entry per identity.

    Each element is a line or a ``(line, source_ref)`` pair. Lines are
    normalized in identity-preserving mode; the entry keeps the first display
    name and source ref seen, and ``quantity`` counts the occurrences.
    """
    canon = canonicalizer or get_canonicalizer()
    entries: dict[str, BatchEntry] = {}

    for element in lines:
        if isinstance(element, tuple):
            line, source_ref = element
        else:
            line, source_ref = element, None

        ident = canon.canonicalize_line(line, NormalizeMode.IDENTITY)
        if not ident.canonical_loose:
            continue

        entry = entries.get(ident.canonical_loose)
        if entry is None:
            entries[ident.canonical_loose] = BatchEntry(
                name=ident.display_name, quantity=1, source_ref=source_ref
            )
        else:
            entry.quantity += 1

    return list(entries.values())


def batch_from_recipes(
    recipes: Iterable[dict[str, Any]],
    canonicalizer: Canonicalizer | None = None,
) -> list[BatchEntry]:
    """Build a sync batch from recipe records, tagging each line with its recipe id."""
    pairs: list[tuple[str, str | None]] = []
    for recipe in recipes:
        recipe_id = recipe.get("id")
        ref = str(recipe_id) if recipe_id is not None else None
        pairs.extend((line, ref) for line in extract_ingredient_lines(recipe))
    return build_batch(pairs, canonicalizer)
