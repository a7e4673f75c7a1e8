"""Duplicate flagging within one batch of ingredient lines.

Groups are advisory. Batches are reviewed by a person before they are
committed, so nothing here merges or drops rows.
"""

from __future__ import annotations

from typing import Iterable

from .canonical import NormalizedIngredient


def group_by_loose_key(
    batch: Iterable[NormalizedIngredient],
) -> dict[str, list[NormalizedIngredient]]:
    """Group every member by ``canonical_loose``, in first-seen order."""
    groups: dict[str, list[NormalizedIngredient]] = {}
    for item in batch:
        if not item.canonical_loose:
            continue
        groups.setdefault(item.canonical_loose, []).append(item)
    return groups


def detect_duplicates(
    batch: Iterable[NormalizedIngredient],
) -> dict[str, list[NormalizedIngredient]]:
    """Return only the loose-key groups with two or more members."""
    return {
        key: members
        for key, members in group_by_loose_key(batch).items()
        if len(members) >= 2
    }


def duplicate_keys_for(batch: list[NormalizedIngredient]) -> list[str | None]:
    """Per-row duplicate group key, or None for rows without a duplicate."""
    dupes = detect_duplicates(batch)
    return [
        item.canonical_loose if item.canonical_loose in dupes else None
        for item in batch
    ]
