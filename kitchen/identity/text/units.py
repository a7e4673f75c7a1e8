"""Cooking unit parsing and unit-family compatibility."""

from __future__ import annotations

import re

# Spelled-out and plural forms → short unit
_UNIT_ALIASES: dict[str, str] = {
    "ounce": "oz",
    "ounces": "oz",
    "gram": "g",
    "grams": "g",
    "kilogram": "kg",
    "kilograms": "kg",
    "pound": "lb",
    "pounds": "lb",
    "lbs": "lb",
    "liter": "l",
    "liters": "l",
    "litre": "l",
    "litres": "l",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "cups": "cup",
    "fl oz": "floz",
    "count": "ct",
    "each": "ct",
    "ea": "ct",
    "pcs": "pc",
    "piece": "pc",
    "pieces": "pc",
}

_UNIT_FAMILIES: dict[str, frozenset[str]] = {
    "mass": frozenset({"g", "kg", "oz", "lb"}),
    "volume": frozenset({"ml", "l", "tsp", "tbsp", "cup", "floz"}),
    "count": frozenset({"ct", "pc"}),
}

_FRACTION_MAP: dict[str, float] = {
    "1/2": 0.5,
    "1/3": 1 / 3,
    "2/3": 2 / 3,
    "1/4": 0.25,
    "3/4": 0.75,
    "1/8": 0.125,
}

_QTY_PATTERN = re.compile(
    r"^\s*(?P<amount>\d+\s+\d+/\d+|\d+/\d+|\d+(?:\.\d+)?)\s*"
    r"(?P<unit>fl\.?\s*oz|[a-z]+\.?)?(?=\s|$)\s*(?P<rest>.*)$",
    re.IGNORECASE,
)


def normalize_unit(unit: str | None) -> str:
    """Return the short form of a unit (``"Grams"`` → ``"g"``)."""
    u = (unit or "").strip().lower().rstrip(".")
    if not u:
        return ""
    u = re.sub(r"\s+", " ", u)
    if u in ("fl. oz", "fl.oz"):
        u = "fl oz"
    return _UNIT_ALIASES.get(u, u)


def unit_family(unit: str | None) -> str:
    """Return ``"mass"``, ``"volume"``, ``"count"`` or ``"unknown"``."""
    u = normalize_unit(unit)
    for family, members in _UNIT_FAMILIES.items():
        if u in members:
            return family
    return "unknown"


def units_compatible(a: str | None, b: str | None) -> bool:
    """Check whether two units measure the same kind of thing.

    Missing or unrecognized units are treated as compatible; the check only
    flags obvious mismatches like grams against cups.
    """
    fa = unit_family(a)
    fb = unit_family(b)
    if fa == "unknown" or fb == "unknown":
        return True
    return fa == fb


def parse_quantity(text: str) -> tuple[float, str, str]:
    """Parse a leading amount and unit from an ingredient line.

    Args:
        text: e.g. "1 1/2 cups flour", "2 lb beef", "3 eggs", "salt"

    Returns:
        (amount, unit, rest) tuple. The unit is normalized and only reported
        when it belongs to a known family; otherwise the word stays in
        ``rest``. Defaults to (1.0, "", text) if no amount leads the line.
    """
    text = (text or "").strip()
    if not text:
        return (1.0, "", "")

    m = _QTY_PATTERN.match(text)
    if not m:
        return (1.0, "", text)

    amount = _parse_number(m.group("amount"))
    unit_word = m.group("unit") or ""
    rest = m.group("rest").strip()

    unit = normalize_unit(unit_word)
    if unit_word and unit_family(unit) == "unknown":
        # "3 eggs": the word is the ingredient, not a unit
        rest = f"{unit_word} {rest}".strip()
        unit = ""
    return (amount, unit, rest)


def _parse_number(s: str) -> float:
    """Parse a number string that may be a fraction or mixed fraction."""
    s = s.strip()
    if not s:
        return 1.0

    if " " in s:
        whole, frac = s.split(None, 1)
        return _parse_number(whole) + _parse_number(frac)

    if s in _FRACTION_MAP:
        return _FRACTION_MAP[s]

    if "/" in s:
        parts = s.split("/")
        try:
            return float(parts[0]) / float(parts[1])
        except (ValueError, ZeroDivisionError):
            return 1.0

    try:
        return float(s)
    except ValueError:
        return 1.0
