"""Derived shopping-list sync.

For every identity in a batch the current rows put it in one of four states:

=================  ==========================================  ================
state              rows for the key                            operation
=================  ==========================================  ================
ACTIVE_MANUAL      an active manual row                        none
ACTIVE_DERIVED     an active derived row                       update if the
                                                               quantity differs
DISMISSED_DERIVED  no active row, a dismissed derived row      revive (and
                                                               update if the
                                                               quantity differs)
ABSENT             nothing                                     insert
=================  ==========================================  ================

Applying a plan and reconciling the same batch again yields an empty plan.
"""

from __future__ import annotations

import enum
import logging
import uuid
from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable

from ..canonical import Canonicalizer, get_canonicalizer
from ..errors import RowNotFoundError, StaleSnapshotError
from .derive import normalized_key
from .models import (
    BatchEntry,
    QuantityUpdate,
    ReconcilePlan,
    Revive,
    ShoppingListItem,
    SourceType,
)

logger = logging.getLogger(__name__)


class RowState(str, enum.Enum):
    ACTIVE_MANUAL = "active_manual"
    ACTIVE_DERIVED = "active_derived"
    DISMISSED_DERIVED = "dismissed_derived"
    ABSENT = "absent"


@dataclass(frozen=True)
class KeyState:
    state: RowState
    row: ShoppingListItem | None = None


class Reconciler:
    """Computes idempotent sync plans for derived shopping-list rows."""

    def __init__(self, canonicalizer: Canonicalizer | None = None) -> None:
        self._canon = canonicalizer or get_canonicalizer()

    def key_for(self, name: str) -> str:
        return normalized_key(name, self._canon)

    def _row_key(self, row: ShoppingListItem) -> str:
        return row.normalized_name or self.key_for(row.name)

    def classify(self, existing: Iterable[ShoppingListItem]) -> dict[str, KeyState]:
        """Map each normalized key to its state.

        An active row always wins over dismissed ones; among several rows of
        the same kind the first seen is used.
        """
        states: dict[str, KeyState] = {}
        for row in existing:
            key = self._row_key(row)
            if not key:
                continue
            current = states.get(key)

            if row.active:
                if current is None or current.state is RowState.DISMISSED_DERIVED:
                    state = (
                        RowState.ACTIVE_MANUAL
                        if row.source_type is SourceType.MANUAL
                        else RowState.ACTIVE_DERIVED
                    )
                    states[key] = KeyState(state, row)
            elif row.source_type is SourceType.DERIVED and current is None:
                states[key] = KeyState(RowState.DISMISSED_DERIVED, row)
            # dismissed manual rows should not exist; they never count
        return states

    def reconcile(
        self,
        batch: Iterable[BatchEntry],
        existing: Iterable[ShoppingListItem],
    ) -> ReconcilePlan:
        states = self.classify(existing)
        plan = ReconcilePlan()

        for key, entry in self._merge_batch(batch).items():
            key_state = states.get(key, KeyState(RowState.ABSENT))
            row = key_state.row
            q_new = entry.quantity

            match key_state.state:
                case RowState.ACTIVE_MANUAL:
                    logger.debug("%r is a manual item, leaving it alone", key)
                case RowState.ACTIVE_DERIVED:
                    if row.quantity != q_new:
                        plan.update.append(QuantityUpdate(row.id, q_new))
                case RowState.DISMISSED_DERIVED:
                    plan.revive.append(Revive(row.id))
                    if row.quantity != q_new:
                        plan.update.append(QuantityUpdate(row.id, q_new))
                case RowState.ABSENT:
                    plan.insert.append(
                        ShoppingListItem(
                            id=None,
                            name=entry.name,
                            normalized_name=key,
                            quantity=q_new,
                            source_type=SourceType.DERIVED,
                            source_recipe_id=entry.source_ref,
                            checked=False,
                            dismissed=False,
                        )
                    )

        logger.info(
            "Reconciled %d identities: %d insert, %d revive, %d update",
            len(states),
            len(plan.insert),
            len(plan.revive),
            len(plan.update),
        )
        return plan

    def _merge_batch(self, batch: Iterable[BatchEntry]) -> dict[str, BatchEntry]:
        """Collapse entries sharing a key so one identity yields one operation."""
        merged: dict[str, BatchEntry] = {}
        for entry in batch:
            key = self.key_for(entry.name)
            if not key:
                continue
            if key in merged:
                first = merged[key]
                merged[key] = replace(first, quantity=first.quantity + entry.quantity)
            else:
                merged[key] = entry
        return merged

    def add_manual(
        self, name: str, existing: Iterable[ShoppingListItem]
    ) -> tuple[ShoppingListItem, bool]:
        """Prepare a manual add.

        Returns the active row already holding this identity with
        ``created=False``, or a new unsaved manual row with ``created=True``.
        """
        display = (name or "").strip()
        if not display:
            raise ValueError("Name is required.")

        key = self.key_for(display)
        state = self.classify(existing).get(key)
        if state is not None and state.state in (
            RowState.ACTIVE_MANUAL,
            RowState.ACTIVE_DERIVED,
        ):
            return state.row, False

        item = ShoppingListItem(
            id=None,
            name=display,
            normalized_name=key,
            quantity=1,
            source_type=SourceType.MANUAL,
        )
        return item, True


def apply_plan(
    existing: Iterable[ShoppingListItem],
    plan: ReconcilePlan,
    id_factory: Callable[[], Any] | None = None,
) -> list[ShoppingListItem]:
    """Apply a plan to an in-memory snapshot and return the new rows.

    The input rows are not modified.

    Raises:
        RowNotFoundError: A revive or update targets an id that is missing.
        StaleSnapshotError: An insert would create a second active row for
            an identity.
    """
    new_id = id_factory or (lambda: str(uuid.uuid4()))
    rows = [replace(r) for r in existing]
    by_id = {r.id: r for r in rows}

    for op in plan.revive:
        row = by_id.get(op.id)
        if row is None:
            raise RowNotFoundError(op.id, "revive")
        row.dismissed = False
        row.checked = False
        row.source_type = SourceType.DERIVED

    for op in plan.update:
        row = by_id.get(op.id)
        if row is None:
            raise RowNotFoundError(op.id, "update")
        row.quantity = op.quantity

    active_keys = {r.normalized_name for r in rows if r.active and r.normalized_name}
    for item in plan.insert:
        if item.normalized_name in active_keys:
            raise StaleSnapshotError(
                f"insert: {item.normalized_name!r} already has an active row "
                f"(snapshot is stale, re-fetch and reconcile again)"
            )
        row = replace(item, id=new_id())
        rows.append(row)
        active_keys.add(row.normalized_name)

    return rows


_default_reconciler: Reconciler | None = None


def get_reconciler() -> Reconciler:
    """Get or create the shared default Reconciler."""
    global _default_reconciler
    if _default_reconciler is None:
        _default_reconciler = Reconciler()
    return _default_reconciler


def reconcile(
    batch: Iterable[BatchEntry], existing: Iterable[ShoppingListItem]
) -> ReconcilePlan:
    return get_reconciler().reconcile(batch, existing)


def add_manual(
    name: str, existing: Iterable[ShoppingListItem]
) -> tuple[ShoppingListItem, bool]:
    return get_reconciler().add_manual(name, existing)
