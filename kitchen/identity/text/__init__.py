"""Text normalization: vocabularies, units and line cleanup."""

from .cleanup import clean_ingredient_lines, to_kitchen_fraction
from .normalizer import NormalizeMode, Normalizer, get_normalizer, normalize
from .units import normalize_unit, parse_quantity, unit_family, units_compatible
from .vocab import (
    CANDY_EGGS,
    DEFAULT_GUARDS,
    DEFAULT_VOCABULARY,
    DisambiguationGuard,
    Vocabulary,
)

__all__ = [
    "Normalizer",
    "NormalizeMode",
    "get_normalizer",
    "normalize",
    "Vocabulary",
    "DisambiguationGuard",
    "CANDY_EGGS",
    "DEFAULT_GUARDS",
    "DEFAULT_VOCABULARY",
    "normalize_unit",
    "parse_quantity",
    "unit_family",
    "units_compatible",
    "clean_ingredient_lines",
    "to_kitchen_fraction",
]
