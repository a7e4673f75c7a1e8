"""Substitute suggestions and pantry coverage for recipe ingredients."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .canonical import Canonicalizer, get_canonicalizer
from .matching import MatchIndex, MatchKind
from .text.normalizer import NormalizeMode

DEFAULT_LIMIT = 3


def suggest_substitutes(
    missing_name: str,
    candidate_names: Iterable[str],
    limit: int = DEFAULT_LIMIT,
    canonicalizer: Canonicalizer | None = None,
) -> list[str]:
    """Rank candidate names by tokens shared with a missing ingredient.

    Candidates sharing no token are dropped. Ties keep the order the
    candidates were given in.

    Args:
        missing_name: e.g. "heavy cream"
        candidate_names: inventory names, e.g. ["whipping cream", "butter"]
        limit: maximum number of suggestions

    Returns:
        Up to ``limit`` candidate names in their original casing.
    """
    canon = canonicalizer or get_canonicalizer()
    missing_tokens = canon.canonicalize_line(missing_name, NormalizeMode.AGGRESSIVE).tokens
    if not missing_tokens or limit <= 0:
        return []

    scored: list[tuple[int, str]] = []
    for name in candidate_names:
        if not isinstance(name, str) or not name.strip():
            continue
        tokens = canon.canonicalize_line(name, NormalizeMode.AGGRESSIVE).tokens
        score = len(missing_tokens & tokens)
        if score > 0:
            scored.append((score, name))

    scored.sort(key=lambda x: x[0], reverse=True)
    return [name for _, name in scored[:limit]]


@dataclass
class CoverageSummary:
    """How much of an ingredient list the pantry already covers."""

    total: int = 0
    have_count: int = 0
    missing: list[str] = field(default_factory=list)
    substitutions: dict[str, list[str]] = field(default_factory=dict)

    @property
    def all_in_stock(self) -> bool:
        return self.total > 0 and self.have_count == self.total

    @property
    def percent(self) -> int:
        if self.total == 0:
            return 0
        return round(self.have_count / self.total * 100)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "have_count": self.have_count,
            "percent": self.percent,
            "all_in_stock": self.all_in_stock,
            "missing": list(self.missing),
            "substitutions": {k: list(v) for k, v in self.substitutions.items()},
        }


def summarize_coverage(
    ingredient_lines: Iterable[str],
    index: MatchIndex,
    limit: int = DEFAULT_LIMIT,
    canonicalizer: Canonicalizer | None = None,
) -> CoverageSummary:
    """Count which recipe ingredients the inventory already has.

    A line is covered by an exact match, or by a loose candidate whose name
    contains every token of the line ("eggs" is covered by "large eggs",
    "heavy cream" is not covered by "sour cream"). Each missing line gets
    substitute suggestions drawn from the indexed names.
    """
    canon = canonicalizer or get_canonicalizer()
    pantry_names = [item.name for item in index.items]
    summary = CoverageSummary()

    for line in ingredient_lines:
        if not isinstance(line, str) or not line.strip():
            continue
        summary.total += 1
        if _is_covered(line, index, canon):
            summary.have_count += 1
            continue

        summary.missing.append(line.strip())
        subs = suggest_substitutes(line, pantry_names, limit=limit, canonicalizer=canon)
        if subs:
            summary.substitutions[line.strip()] = subs

    return summary


def _is_covered(line: str, index: MatchIndex, canon: Canonicalizer) -> bool:
    result = index.lookup(line)
    if result.kind is MatchKind.EXACT:
        return True
    if result.kind is MatchKind.NONE:
        return False
    wanted = canon.canonicalize_line(line, NormalizeMode.AGGRESSIVE).tokens
    return any(
        wanted <= canon.canonicalize_line(c.name, NormalizeMode.AGGRESSIVE).tokens
        for c in result.candidates
    )
