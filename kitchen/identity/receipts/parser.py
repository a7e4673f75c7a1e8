"""Item extraction from pasted receipt and order-history text."""

from __future__ import annotations

import logging
import re
from typing import Iterable

from ..canonical import Canonicalizer, get_canonicalizer
from ..categories import categorize_item_name
from ..duplicates import duplicate_keys_for
from ..matching import MatchIndex
from ..text.normalizer import NormalizeMode
from .models import PurchaseLine, PurchaseReview

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITEMS = 160

# Whole lines that carry no item
_JUNK_LINES: frozenset[str] = frozenset({
    "qty", "quantity", "add", "remove", "write a review", "reward logo",
    "rewards", "points", "subtotal", "total", "tax", "hst", "gst", "pst",
    "tip", "change", "cash", "visa", "mastercard", "amex", "debit", "credit",
    "balance", "tender", "amount", "order summary", "order details",
})

# Order-page chatter that can sit anywhere in a line
_JUNK_PHRASES = re.compile(
    r"(write a review|return eligible|delivered|shipping|pickup|substitution"
    r"|substituted|out of stock|out-of-stock|sold by|fulfilled by"
    r"|customer service|support|thanks for your order)",
    re.IGNORECASE,
)
_SAVINGS_PHRASES = re.compile(
    r"(discount price|was\s+\$?\d|you saved|from savings|from discounts|coupon"
    r"|promo|promotion|deal|rollback|price drop)",
    re.IGNORECASE,
)

_PRICE_ONLY = re.compile(r"^\$?\s*\d+\.\d{2}\s*$")
_NUMERIC_ONLY = re.compile(r"^[\d$.\-+()\s]+$")
_HAS_LETTER = re.compile(r"[a-zA-Z]")
_TRAILING_PRICE = re.compile(r"\s+\$?\d+\.\d{2}\s*$")

# "2 x milk", "2 milk", "milk x 2", "milk 2" in that order of preference
_QTY_PATTERNS: tuple[tuple[re.Pattern[str], int, int], ...] = (
    (re.compile(r"^\s*(\d+)\s*[x×]\s*(.+)$", re.IGNORECASE), 1, 2),
    (re.compile(r"^\s*(\d+)\s+(.+)$"), 1, 2),
    (re.compile(r"^(.+?)\s+[x×]\s*(\d+)\s*$", re.IGNORECASE), 2, 1),
    (re.compile(r"^(.+?)\s+(\d+)\s*$"), 2, 1),
)


def _clean_line(line: str) -> str:
    return re.sub(r"\s+", " ", line.replace("\u00a0", " ")).strip()


def is_junk_line(line: str) -> bool:
    """Check if a receipt line is a total, tender, price or page chatter."""
    text = line.strip()
    if len(text) < 2:
        return True
    if text.lower() in _JUNK_LINES:
        return True
    if _JUNK_PHRASES.search(text) or _SAVINGS_PHRASES.search(text):
        return True
    if _PRICE_ONLY.match(text) or _NUMERIC_ONLY.match(text):
        return True
    return not _HAS_LETTER.search(text)


def strip_trailing_price(name: str) -> str:
    """Remove a trailing price such as ``" $3.49"``."""
    return _TRAILING_PRICE.sub("", name).strip()


def split_quantity(line: str) -> tuple[str, int]:
    """Split a receipt line into ``(name, quantity)``; quantity defaults to 1."""
    for pattern, qty_group, name_group in _QTY_PATTERNS:
        m = pattern.match(line)
        if m:
            return m.group(name_group).strip(), max(1, int(m.group(qty_group)))
    return line.strip(), 1


def parse_receipt_text(
    text: str,
    max_items: int = DEFAULT_MAX_ITEMS,
    canonicalizer: Canonicalizer | None = None,
) -> list[PurchaseLine]:
    """Extract purchased items from pasted receipt text.

    Junk lines are dropped, quantities and trailing prices are split off, and
    repeated (name, quantity) pairs are kept once. At most ``max_items`` lines
    are returned.
    """
    canon = canonicalizer or get_canonicalizer()
    purchases: list[PurchaseLine] = []
    seen: set[tuple[str, int]] = set()

    for raw in (text or "").splitlines():
        line = _clean_line(raw)
        if is_junk_line(line):
            continue

        name, quantity = split_quantity(line)
        name = strip_trailing_price(name)
        if not name or is_junk_line(name):
            continue

        key = (name.lower(), quantity)
        if key in seen:
            continue
        seen.add(key)

        if len(purchases) >= max_items:
            logger.warning("Receipt truncated at %d items", max_items)
            break

        ident = canon.canonicalize_line(name, NormalizeMode.AGGRESSIVE)
        purchases.append(
            PurchaseLine(
                raw=line,
                name=ident.display_name or name,
                quantity=quantity,
                normalized=ident,
                category=categorize_item_name(ident.display_name or name),
            )
        )

    logger.info("Parsed %d items from receipt text", len(purchases))
    return purchases


def review_purchases(
    lines: Iterable[PurchaseLine],
    index: MatchIndex,
    canonicalizer: Canonicalizer | None = None,
) -> list[PurchaseReview]:
    """Attach inventory matches and duplicate-group keys to purchase lines.

    Lines without a precomputed ``normalized`` value are canonicalized on the
    way in. Nothing is merged; duplicates are only flagged.
    """
    canon = canonicalizer or get_canonicalizer()
    lines = list(lines)
    for line in lines:
        if line.normalized is None:
            line.normalized = canon.canonicalize_line(line.name, NormalizeMode.AGGRESSIVE)

    dup_keys = duplicate_keys_for([line.normalized for line in lines])
    return [
        PurchaseReview(line=line, match=index.lookup(line.name), duplicate_key=key)
        for line, key in zip(lines, dup_keys)
    ]
