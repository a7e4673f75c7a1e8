"""Tests for derived shopping-list reconciliation."""

import itertools

import pytest

from kitchen.identity.errors import IdentityError, RowNotFoundError, StaleSnapshotError
from kitchen.identity.shopping import (
    BatchEntry,
    QuantityUpdate,
    ReconcilePlan,
    Reconciler,
    Revive,
    RowState,
    ShoppingListItem,
    SourceType,
    add_manual,
    apply_plan,
    build_batch,
    reconcile,
)


def _row(id, name, quantity=1, source=SourceType.DERIVED, dismissed=False, checked=False):
    return ShoppingListItem(
        id=id,
        name=name,
        normalized_name=name.lower(),
        quantity=quantity,
        source_type=source,
        checked=checked,
        dismissed=dismissed,
    )


@pytest.fixture
def ids():
    counter = itertools.count(1)
    return lambda: f"row-{next(counter)}"


class TestTransitions:
    def test_absent_inserts(self):
        plan = reconcile([BatchEntry("flour"), BatchEntry("onion", 2)], [])
        assert [(i.name, i.quantity) for i in plan.insert] == [("flour", 1), ("onion", 2)]
        inserted = plan.insert[0]
        assert inserted.source_type is SourceType.DERIVED
        assert inserted.normalized_name == "flour"
        assert not inserted.checked
        assert not inserted.dismissed
        assert plan.revive == []
        assert plan.update == []

    def test_active_manual_untouched(self):
        existing = [_row("m1", "milk", source=SourceType.MANUAL)]
        plan = reconcile([BatchEntry("milk", 3)], existing)
        assert plan.is_empty

    def test_active_derived_same_quantity(self):
        plan = reconcile([BatchEntry("milk")], [_row("d1", "milk")])
        assert plan.is_empty

    def test_active_derived_quantity_changed(self):
        plan = reconcile([BatchEntry("milk", 2)], [_row("d1", "milk")])
        assert plan.update == [QuantityUpdate("d1", 2)]
        assert plan.insert == []

    def test_dismissed_derived_revived(self):
        existing = [_row("d1", "onion", dismissed=True, checked=True)]
        plan = reconcile([BatchEntry("onion")], existing)
        assert plan.revive == [Revive("d1")]
        assert plan.insert == []
        assert plan.update == []

    def test_dismissed_derived_revived_and_updated(self):
        existing = [_row("d1", "onion", quantity=1, dismissed=True)]
        plan = reconcile([BatchEntry("onion", 3)], existing)
        assert plan.revive == [Revive("d1")]
        assert plan.update == [QuantityUpdate("d1", 3)]

    def test_active_wins_over_dismissed(self):
        existing = [
            _row("d1", "onion", dismissed=True),
            _row("d2", "onion"),
        ]
        plan = reconcile([BatchEntry("onion")], existing)
        assert plan.is_empty

    def test_first_dismissed_revived(self):
        existing = [
            _row("d1", "onion", dismissed=True),
            _row("d2", "onion", dismissed=True),
        ]
        plan = reconcile([BatchEntry("onion")], existing)
        assert plan.revive == [Revive("d1")]

    def test_dismissed_manual_ignored(self):
        existing = [_row("m1", "onion", source=SourceType.MANUAL, dismissed=True)]
        plan = reconcile([BatchEntry("onion")], existing)
        assert len(plan.insert) == 1
        assert plan.revive == []

    def test_same_key_merged(self):
        plan = reconcile([BatchEntry("milk"), BatchEntry("Milk", 2)], [])
        assert len(plan.insert) == 1
        assert plan.insert[0].quantity == 3
        assert plan.insert[0].name == "milk"

    def test_row_without_normalized_name(self):
        row = ShoppingListItem(id="d1", name="Shredded Cheese", normalized_name="")
        plan = reconcile([BatchEntry("cheese, shredded")], [row])
        assert plan.is_empty


class TestClassify:
    def test_states(self):
        states = Reconciler().classify([
            _row("m1", "milk", source=SourceType.MANUAL),
            _row("d1", "bread"),
            _row("d2", "onion", dismissed=True),
        ])
        assert states["milk"].state is RowState.ACTIVE_MANUAL
        assert states["bread"].state is RowState.ACTIVE_DERIVED
        assert states["onion"].state is RowState.DISMISSED_DERIVED
        assert states["onion"].row.id == "d2"


class TestIdempotence:
    def test_insert_then_empty(self, ids):
        batch = build_batch(["2 cups flour", "1 onion", "onion"])
        plan = reconcile(batch, [])
        assert len(plan.insert) == 2

        rows = apply_plan([], plan, id_factory=ids)
        assert [r.id for r in rows] == ["row-1", "row-2"]
        assert reconcile(batch, rows).is_empty

    def test_revive_then_empty(self, ids):
        existing = [_row("d1", "onion", quantity=1, dismissed=True, checked=True)]
        batch = [BatchEntry("onion", 2)]
        rows = apply_plan(existing, reconcile(batch, existing), id_factory=ids)

        assert len(rows) == 1
        assert not rows[0].dismissed
        assert not rows[0].checked
        assert rows[0].quantity == 2
        assert reconcile(batch, rows).is_empty


class TestApplyPlan:
    def test_input_not_modified(self):
        existing = [_row("d1", "onion", dismissed=True)]
        apply_plan(existing, reconcile([BatchEntry("onion")], existing))
        assert existing[0].dismissed is True

    def test_default_ids_are_unique(self):
        plan = reconcile([BatchEntry("flour"), BatchEntry("sugar")], [])
        rows = apply_plan([], plan)
        assert rows[0].id != rows[1].id

    def test_missing_revive_target(self):
        plan = ReconcilePlan(revive=[Revive("gone")])
        with pytest.raises(RowNotFoundError) as exc_info:
            apply_plan([], plan)
        assert exc_info.value.row_id == "gone"
        assert exc_info.value.operation == "revive"

    def test_missing_update_target_is_stale_snapshot(self):
        plan = ReconcilePlan(update=[QuantityUpdate("gone", 2)])
        with pytest.raises(StaleSnapshotError):
            apply_plan([_row("d1", "milk")], plan)

    def test_insert_collision(self):
        plan = reconcile([BatchEntry("milk")], [])
        with pytest.raises(StaleSnapshotError):
            apply_plan([_row("m1", "milk", source=SourceType.MANUAL)], plan)


class TestAddManual:
    def test_new_item(self):
        item, created = add_manual("  Paper Towels ", [])
        assert created
        assert item.name == "Paper Towels"
        assert item.normalized_name == "paper towels"
        assert item.source_type is SourceType.MANUAL
        assert item.id is None

    def test_existing_active_row(self):
        existing = [_row("d1", "milk")]
        item, created = add_manual("1 Milk", existing)
        assert not created
        assert item.id == "d1"

    def test_dismissed_row_not_reused(self):
        existing = [_row("d1", "milk", dismissed=True)]
        item, created = add_manual("milk", existing)
        assert created
        assert item.source_type is SourceType.MANUAL

    def test_blank_name(self):
        with pytest.raises(ValueError):
            add_manual("   ", [])


class TestModels:
    def test_plan_to_dict_omits_insert_ids(self):
        plan = reconcile([BatchEntry("flour")], [])
        data = plan.to_dict()
        assert "id" not in data["insert"][0]
        assert data["insert"][0]["source_type"] == "derived"

    def test_revive_to_dict(self):
        assert Revive("d1").to_dict() == {
            "id": "d1",
            "dismissed": False,
            "checked": False,
            "source_type": "derived",
        }

    def test_summary(self):
        assert ReconcilePlan().summary() == "All derived items were already active."
        plan = ReconcilePlan(revive=[Revive("a")], update=[QuantityUpdate("a", 2)])
        assert plan.summary() == "Sync will revive 1, update 1."

    def test_item_from_dict_legacy_flag(self):
        item = ShoppingListItem.from_dict(
            {"id": 7, "name": "Eggs", "is_derived": True, "quantity": "3"}
        )
        assert item.source_type is SourceType.DERIVED
        assert item.quantity == 3

    def test_item_from_dict_defaults_to_manual(self):
        item = ShoppingListItem.from_dict({"id": 8, "name": "Soap"})
        assert item.source_type is SourceType.MANUAL
        assert item.active

    def test_item_from_dict_unknown_source(self):
        with pytest.raises(IdentityError, match="'r9'"):
            ShoppingListItem.from_dict({"id": "r9", "name": "Eggs", "source_type": "pantry"})


def test_comma_qualified_lines_stay_separate():
    batch = build_batch(["1 can beans, black", "1 can beans, kidney"])
    assert [(e.name, e.quantity) for e in batch] == [
        ("beans, black", 1),
        ("beans, kidney", 1),
    ]
    plan = reconcile(batch, [])
    assert len(plan.insert) == 2
