"""Derived shopping-list rows and their reconciliation."""

from .derive import batch_from_recipes, build_batch, extract_ingredient_lines, normalized_key
from .models import (
    BatchEntry,
    QuantityUpdate,
    ReconcilePlan,
    Revive,
    ShoppingListItem,
    SourceType,
)
from .reconcile import Reconciler, RowState, add_manual, apply_plan, reconcile

__all__ = [
    "BatchEntry",
    "QuantityUpdate",
    "ReconcilePlan",
    "Revive",
    "ShoppingListItem",
    "SourceType",
    "Reconciler",
    "RowState",
    "add_manual",
    "apply_plan",
    "reconcile",
    "batch_from_recipes",
    "build_batch",
    "extract_ingredient_lines",
    "normalized_key",
]
