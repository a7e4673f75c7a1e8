"""Data models for shopping-list rows and reconciliation output."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from ..errors import IdentityError


class SourceType(str, enum.Enum):
    MANUAL = "manual"
    DERIVED = "derived"


@dataclass
class ShoppingListItem:
    """A persisted shopping-list row.

    Derived rows are soft-hidden with ``dismissed`` so a later sync can revive
    them; manual rows are deleted outright instead.
    """

    id: Any
    name: str
    normalized_name: str
    quantity: int = 1
    source_type: SourceType = SourceType.DERIVED
    source_recipe_id: str | None = None
    checked: bool = False
    dismissed: bool = False

    @property
    def active(self) -> bool:
        return not self.dismissed

    @classmethod
    def from_dict(cls, row: dict) -> ShoppingListItem:
        source = str(row.get("source_type") or "").lower()
        if not source:
            source = "derived" if row.get("is_derived") else "manual"
        try:
            source_type = SourceType(source)
        except ValueError:
            raise IdentityError(
                f"shopping-list row {row.get('id')!r}: unknown source_type {source!r}"
            ) from None
        try:
            quantity = int(row.get("quantity") or 1)
        except (TypeError, ValueError):
            quantity = 1
        return cls(
            id=row.get("id"),
            name=str(row.get("name") or ""),
            normalized_name=str(row.get("normalized_name") or ""),
            quantity=quantity,
            source_type=source_type,
            source_recipe_id=row.get("source_recipe_id"),
            checked=bool(row.get("checked", False)),
            dismissed=bool(row.get("dismissed", False)),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "normalized_name": self.normalized_name,
            "quantity": self.quantity,
            "source_type": self.source_type.value,
            "source_recipe_id": self.source_recipe_id,
            "checked": self.checked,
            "dismissed": self.dismissed,
        }


@dataclass
class BatchEntry:
    """One derived identity requested by a sync run."""

    name: str
    quantity: int = 1  # occurrences across the source lines
    source_ref: str | None = None


@dataclass(frozen=True)
class Revive:
    """Un-dismiss a derived row: dismissed=False, checked=False."""

    id: Any

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "dismissed": False,
            "checked": False,
            "source_type": SourceType.DERIVED.value,
        }


@dataclass(frozen=True)
class QuantityUpdate:
    id: Any
    quantity: int

    def to_dict(self) -> dict:
        return {"id": self.id, "quantity": self.quantity}


@dataclass
class ReconcilePlan:
    """The minimal state-changing operations for one sync run."""

    insert: list[ShoppingListItem] = field(default_factory=list)
    revive: list[Revive] = field(default_factory=list)
    update: list[QuantityUpdate] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.insert or self.revive or self.update)

    def summary(self) -> str:
        if self.is_empty:
            return "All derived items were already active."
        parts = []
        if self.insert:
            parts.append(f"add {len(self.insert)}")
        if self.revive:
            parts.append(f"revive {len(self.revive)}")
        if self.update:
            parts.append(f"update {len(self.update)}")
        return "Sync will " + ", ".join(parts) + "."

    def to_dict(self) -> dict:
        return {
            "insert": [
                {k: v for k, v in item.to_dict().items() if k != "id"}
                for item in self.insert
            ],
            "revive": [r.to_dict() for r in self.revive],
            "update": [u.to_dict() for u in self.update],
        }
