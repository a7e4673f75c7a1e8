"""Receipt text parsing and purchase review."""

from .models import PurchaseLine, PurchaseReview
from .parser import (
    is_junk_line,
    parse_receipt_text,
    review_purchases,
    split_quantity,
    strip_trailing_price,
)

__all__ = [
    "PurchaseLine",
    "PurchaseReview",
    "is_junk_line",
    "parse_receipt_text",
    "review_purchases",
    "split_quantity",
    "strip_trailing_price",
]
