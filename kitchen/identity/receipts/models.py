"""Data models for pasted receipt lines and their review rows."""

from __future__ import annotations

from dataclasses import dataclass

from ..canonical import NormalizedIngredient
from ..matching import MatchResult


@dataclass
class PurchaseLine:
    """A single purchased item pulled out of receipt text."""

    raw: str                 # Line as it appeared on the receipt
    name: str                # Name with quantity and price removed
    quantity: int = 1
    normalized: NormalizedIngredient | None = None
    category: str = "Other"  # Shopping aisle, see categories.py

    def to_dict(self) -> dict:
        return {
            "raw": self.raw,
            "name": self.name,
            "quantity": self.quantity,
            "normalized": self.normalized.to_dict() if self.normalized else None,
            "category": self.category,
        }


@dataclass
class PurchaseReview:
    """A purchase line with what the inventory already holds for it."""

    line: PurchaseLine
    match: MatchResult
    duplicate_key: str | None = None

    def to_dict(self) -> dict:
        return {
            **self.line.to_dict(),
            "match": self.match.to_dict(),
            "match_label": self.match.label(),
            "duplicate_key": self.duplicate_key,
        }
