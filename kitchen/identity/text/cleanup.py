"""Tidy pasted ingredient lists before they are stored on a recipe."""

from __future__ import annotations

import re
from fractions import Fraction

_COMMON_UNITS: tuple[str, ...] = (
    "tsp", "teaspoon", "teaspoons",
    "tbsp", "tablespoon", "tablespoons",
    "cup", "cups",
    "oz", "ounce", "ounces",
    "lb", "pound", "pounds",
    "g", "gram", "grams",
    "kg", "ml", "l", "liter", "liters",
)

_LEADING_DECIMAL = re.compile(r"^\s*(\d+\.\d+)\s+(.*)$")
_BULLET = re.compile(r"^\s*[-*•·]+\s*")


def clean_ingredient_lines(value: object) -> list[str]:
    """Split, tidy and de-duplicate ingredient lines.

    Accepts a newline-separated string or a list. Bullets are stripped,
    whitespace collapsed, leading decimals turned into kitchen fractions
    ("0.3333 cup butter" → "1/3 cup butter") and case-insensitive repeats
    dropped, keeping the first spelling.
    """
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        lines = [v if isinstance(v, str) else str(v) for v in value]
    else:
        lines = str(value).split("\n")

    out: list[str] = []
    seen: set[str] = set()
    for line in lines:
        line = _BULLET.sub("", line).strip()
        line = re.sub(r"\s+", " ", line)
        if not line:
            continue
        line = _decimal_to_fraction(line)
        key = line.lower()
        if key not in seen:
            seen.add(key)
            out.append(line)
    return out


def to_kitchen_fraction(value: float, max_denominator: int = 16) -> str | None:
    """Format a positive amount as "1 1/2" style text.

    Returns None when no fraction with a denominator up to
    ``max_denominator`` lands within 0.03 of the value.
    """
    if value <= 0 or value != value or value == float("inf"):
        return None

    whole = int(value)
    frac = value - whole
    if frac < 0.001:
        return str(whole)
    if 1 - frac < 0.001:
        return str(whole + 1)

    approx = Fraction(frac).limit_denominator(max_denominator)
    if abs(float(approx) - frac) > 0.03:
        return None
    if approx.numerator == 0:
        return str(whole)
    if approx == 1:
        return str(whole + 1)
    if whole == 0:
        return f"{approx.numerator}/{approx.denominator}"
    return f"{whole} {approx.numerator}/{approx.denominator}"


def _looks_like_measurement(line: str) -> bool:
    lower = line.lower()
    return any(
        f" {u} " in f"{lower} " or lower.startswith(f"{u} ") or f"{u}," in lower
        for u in _COMMON_UNITS
    )


def _decimal_to_fraction(line: str) -> str:
    m = _LEADING_DECIMAL.match(line)
    if not m or not _looks_like_measurement(line):
        return line

    pretty = to_kitchen_fraction(float(m.group(1)))
    if pretty is None:
        return line
    return f"{pretty} {m.group(2)}".strip()
