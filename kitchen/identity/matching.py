"""Inventory lookup by canonical identity.

The index is built once per batch from an inventory snapshot and answers
"do we already have this?" at two fidelities: an exact strict-key hit, or a
loose hit ranked by shared tokens.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from .canonical import Canonicalizer, get_canonicalizer
from .text.normalizer import NormalizeMode
from .text.units import units_compatible

logger = logging.getLogger(__name__)

DEFAULT_LOOSE_LIMIT = 4


class MatchKind(str, enum.Enum):
    EXACT = "exact"
    LOOSE = "loose"
    NONE = "none"


@dataclass
class InventoryItem:
    """A pantry/freezer record owned by the storage layer."""

    id: Any
    name: str
    quantity: float | None = None
    unit: str | None = None
    location: str | None = None

    @classmethod
    def from_dict(cls, row: dict) -> InventoryItem:
        """Build from a storage row, accepting the older column names."""
        name = _first_text(row, "name", "item_name", "title", "label", "food_name")
        raw_qty = _first_present(row, "quantity", "qty", "count", "amount")
        try:
            quantity = float(raw_qty) if raw_qty is not None else None
        except (TypeError, ValueError):
            quantity = None
        return cls(
            id=row.get("id"),
            name=name,
            quantity=quantity,
            unit=_first_text(row, "unit", "qty_unit", "uom") or None,
            location=_first_text(row, "location", "storage", "area") or None,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "location": self.location,
        }


@dataclass
class MatchResult:
    kind: MatchKind
    candidates: list[InventoryItem] = field(default_factory=list)
    unit_warning: bool = False
    canonical: str = ""

    @property
    def found(self) -> bool:
        return self.kind is not MatchKind.NONE

    def label(self) -> str | None:
        """Short "where is it" text for the best candidate."""
        if not self.candidates:
            return None
        first = self.candidates[0]
        label = first.location or "Somewhere"
        if first.quantity is not None:
            qty = f"{first.quantity:g}"
            label += f" • {qty} {first.unit}" if first.unit else f" • {qty}"
        if self.unit_warning:
            label += " • (unit differs)"
        return label

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "candidates": [c.to_dict() for c in self.candidates],
            "unit_warning": self.unit_warning,
            "canonical": self.canonical,
        }


@dataclass
class _LooseEntry:
    tokens: frozenset[str]
    items: list[InventoryItem] = field(default_factory=list)


class MatchIndex:
    """Strict and loose lookup tables over one inventory snapshot."""

    def __init__(
        self,
        canonicalizer: Canonicalizer | None = None,
        loose_limit: int = DEFAULT_LOOSE_LIMIT,
    ) -> None:
        self._canonicalizer = canonicalizer or get_canonicalizer()
        self._loose_limit = max(1, loose_limit)
        self._by_strict: dict[str, list[InventoryItem]] = {}
        self._by_loose: dict[str, _LooseEntry] = {}
        self._size = 0

    @classmethod
    def build(
        cls,
        items: Iterable[InventoryItem | dict],
        canonicalizer: Canonicalizer | None = None,
        loose_limit: int = DEFAULT_LOOSE_LIMIT,
    ) -> MatchIndex:
        index = cls(canonicalizer, loose_limit)
        for item in items:
            if isinstance(item, dict):
                item = InventoryItem.from_dict(item)
            index.add(item)
        logger.info(
            "Match index built: %d items, %d strict keys, %d loose keys",
            index._size,
            len(index._by_strict),
            len(index._by_loose),
        )
        return index

    def add(self, item: InventoryItem) -> None:
        """Index one item. Nameless and zero-quantity rows are skipped."""
        name = (item.name or "").strip()
        if not name:
            return
        if item.quantity is not None and item.quantity == 0:
            return

        ident = self._canonicalizer.canonicalize_line(name, NormalizeMode.AGGRESSIVE)
        if not ident.canonical_strict:
            return

        self._by_strict.setdefault(ident.canonical_strict, []).append(item)
        entry = self._by_loose.setdefault(
            ident.canonical_loose, _LooseEntry(tokens=ident.tokens)
        )
        entry.items.append(item)
        self._size += 1

    def __len__(self) -> int:
        return self._size

    @property
    def items(self) -> list[InventoryItem]:
        return [item for items in self._by_strict.values() for item in items]

    def lookup(self, name: str, unit: str | None = None) -> MatchResult:
        """Find inventory candidates for a name.

        Strict key hit → EXACT with every item under the key. Otherwise items
        sharing at least one token → LOOSE, most shared tokens first, capped
        at ``loose_limit``. Otherwise NONE.
        """
        ident = self._canonicalizer.canonicalize_line(name, NormalizeMode.AGGRESSIVE)
        if not ident.tokens:
            return MatchResult(kind=MatchKind.NONE)

        exact = self._by_strict.get(ident.canonical_strict)
        if exact:
            return MatchResult(
                kind=MatchKind.EXACT,
                candidates=list(exact),
                unit_warning=_unit_warning(unit, exact),
                canonical=ident.canonical_strict,
            )

        scored: list[tuple[int, InventoryItem]] = []
        for entry in self._by_loose.values():
            overlap = len(ident.tokens & entry.tokens)
            if overlap > 0:
                scored.extend((overlap, item) for item in entry.items)
        if not scored:
            return MatchResult(kind=MatchKind.NONE, canonical=ident.canonical_loose)

        # sort is stable, so equal overlaps keep insertion order
        scored.sort(key=lambda x: x[0], reverse=True)
        candidates = [item for _, item in scored[: self._loose_limit]]
        logger.debug(
            "Loose match for %r: %d candidates (best overlap %d)",
            name,
            len(candidates),
            scored[0][0],
        )
        return MatchResult(
            kind=MatchKind.LOOSE,
            candidates=candidates,
            unit_warning=_unit_warning(unit, candidates),
            canonical=ident.canonical_loose,
        )


def _unit_warning(unit: str | None, candidates: list[InventoryItem]) -> bool:
    if not unit or not candidates:
        return False
    return not any(units_compatible(unit, c.unit) for c in candidates)


def _first_present(row: dict, *keys: str) -> Any:
    for key in keys:
        if row.get(key) is not None:
            return row[key]
    return None


def _first_text(row: dict, *keys: str) -> str:
    for key in keys:
        value = row.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return ""


def build_index(
    items: Iterable[InventoryItem | dict], loose_limit: int = DEFAULT_LOOSE_LIMIT
) -> MatchIndex:
    return MatchIndex.build(items, loose_limit=loose_limit)


def lookup(index: MatchIndex, name: str, unit: str | None = None) -> MatchResult:
    return index.lookup(name, unit)
