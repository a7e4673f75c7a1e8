"""Ingredient identity and reconciliation engine."""

from .canonical import (
    Canonicalizer,
    NormalizedIngredient,
    canonicalize,
    canonicalize_line,
    get_canonicalizer,
)
from .categories import categorize_item_name
from .config import EngineConfig, load_config
from .duplicates import detect_duplicates, duplicate_keys_for, group_by_loose_key
from .errors import ConfigError, IdentityError, RowNotFoundError, StaleSnapshotError
from .matching import InventoryItem, MatchIndex, MatchKind, MatchResult, build_index, lookup
from .receipts import PurchaseLine, PurchaseReview, parse_receipt_text, review_purchases
from .shopping import (
    BatchEntry,
    ReconcilePlan,
    Reconciler,
    ShoppingListItem,
    SourceType,
    add_manual,
    apply_plan,
    build_batch,
    normalized_key,
    reconcile,
)
from .substitutes import CoverageSummary, suggest_substitutes, summarize_coverage
from .text import NormalizeMode, Normalizer, Vocabulary, normalize

__all__ = [
    "Normalizer",
    "NormalizeMode",
    "normalize",
    "Vocabulary",
    "Canonicalizer",
    "NormalizedIngredient",
    "canonicalize",
    "canonicalize_line",
    "get_canonicalizer",
    "InventoryItem",
    "MatchIndex",
    "MatchKind",
    "MatchResult",
    "build_index",
    "lookup",
    "detect_duplicates",
    "duplicate_keys_for",
    "group_by_loose_key",
    "suggest_substitutes",
    "summarize_coverage",
    "CoverageSummary",
    "BatchEntry",
    "ReconcilePlan",
    "Reconciler",
    "ShoppingListItem",
    "SourceType",
    "add_manual",
    "apply_plan",
    "build_batch",
    "normalized_key",
    "reconcile",
    "PurchaseLine",
    "PurchaseReview",
    "parse_receipt_text",
    "review_purchases",
    "categorize_item_name",
    "EngineConfig",
    "load_config",
    "IdentityError",
    "ConfigError",
    "StaleSnapshotError",
    "RowNotFoundError",
]
