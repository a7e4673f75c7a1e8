"""Word lists shared by the normalizer and canonicalizer.

The defaults live in module-level tuples. ``Vocabulary`` bundles them into one
immutable value that is handed to ``Normalizer``/``Canonicalizer`` at
construction, so tests and config files can swap in other word lists.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace

# Leading measurement units stripped from ingredient lines
_UNITS: tuple[str, ...] = (
    "cup", "cups",
    "tbsp", "tablespoon", "tablespoons",
    "tsp", "teaspoon", "teaspoons",
    "oz", "ounce", "ounces",
    "lb", "lbs", "pound", "pounds",
    "g", "gram", "grams",
    "kg",
    "ml",
    "l", "liter", "litre", "liters", "litres",
    "pinch", "dash",
    "clove", "cloves",
    "slice", "slices",
    "can", "cans",
    "package", "packages",
    "packet", "packets",
)

# Units that appear in trailing package sizes ("500 g", "2 x 250 ml")
_SIZE_UNITS: tuple[str, ...] = (
    "kg", "g", "lb", "lbs", "oz", "ml", "l",
    "liter", "liters", "litre", "litres",
)

# Pack-count words ("6 pack", "12 ct")
_PACK_WORDS: tuple[str, ...] = ("pack", "pk", "ct", "count")

# Clause keywords that mark notes rather than identity
_REMOVABLE_DESCRIPTORS: tuple[str, ...] = (
    "divided",
    "melted",
    "softened",
    "room temperature",
    "to taste",
    "as needed",
    "for serving",
    "for garnish",
    "optional",
    "peeled",
    "seeded",
    "crushed",
    "drained",
    "rinsed",
    "fresh",
    "packed",
    "warm",
    "cold",
)

# Preparation words kept in identity-preserving mode
_PREP_DESCRIPTORS: tuple[str, ...] = (
    "chopped",
    "diced",
    "minced",
    "sliced",
    "grated",
    "shredded",
)

_STOP_WORDS: frozenset[str] = frozenset({
    "the", "a", "an", "and", "of", "with", "for", "to", "in", "on",
    "now", "fresh", "original", "classic",
})

# Trailing "sold in ..." / origin notes on receipt product titles
_TAIL_NOTES: tuple[str, ...] = (
    r"sold in\s+(?:singles?|each|bulk|bunch(?:es)?|bags?)\b.*",
    r"(?:prepared in|made in|product of|imported)\b[^,]*",
)


@dataclass(frozen=True)
class DisambiguationGuard:
    """Rewrites a false-positive phrase into a fused sentinel token.

    When any trigger matches the cleaned lowercase text, each fusion pattern is
    replaced by its sentinel and ``drop_tokens`` are removed after tokenizing.
    """

    name: str
    triggers: tuple[str, ...]
    fusions: tuple[tuple[str, str], ...] = ()
    drop_tokens: frozenset[str] = frozenset()

    def matches(self, text: str) -> bool:
        return any(re.search(p, text) for p in self.triggers)

    def fuse(self, text: str) -> str:
        for pattern, sentinel in self.fusions:
            text = re.sub(pattern, sentinel, text)
        return text

    def filter_tokens(self, tokens: list[str]) -> list[str]:
        return [t for t in tokens if t not in self.drop_tokens]


# "Mini eggs" are candy; they must never satisfy a recipe's eggs.
CANDY_EGGS = DisambiguationGuard(
    name="candy_eggs",
    triggers=(
        r"\bmini\s+eggs?\b",
        r"\bcadbury\b",
        r"\bchocolate\s+eggs?\b",
        r"\bcandy\s+eggs?\b",
        r"(?=.*\beggs?\b)(?=.*\b(?:chocolate|candy|sweets?|treats?)\b)",
    ),
    fusions=(
        (r"\bmini\s+eggs?\b", "mini_eggs"),
        (r"\bchocolate\s+eggs?\b", "chocolate_eggs"),
        (r"\bcandy\s+eggs?\b", "candy_eggs"),
    ),
    drop_tokens=frozenset({"egg", "eggs"}),
)

DEFAULT_GUARDS: tuple[DisambiguationGuard, ...] = (CANDY_EGGS,)


@dataclass(frozen=True)
class Vocabulary:
    units: tuple[str, ...] = _UNITS
    size_units: tuple[str, ...] = _SIZE_UNITS
    pack_words: tuple[str, ...] = _PACK_WORDS
    removable_descriptors: tuple[str, ...] = _REMOVABLE_DESCRIPTORS
    prep_descriptors: tuple[str, ...] = _PREP_DESCRIPTORS
    stop_words: frozenset[str] = _STOP_WORDS
    tail_notes: tuple[str, ...] = _TAIL_NOTES
    guards: tuple[DisambiguationGuard, ...] = field(default=DEFAULT_GUARDS)

    def extended(
        self,
        units: list[str] | tuple[str, ...] = (),
        stop_words: list[str] | tuple[str, ...] = (),
        removable_descriptors: list[str] | tuple[str, ...] = (),
        prep_descriptors: list[str] | tuple[str, ...] = (),
        guards: list[DisambiguationGuard] | tuple[DisambiguationGuard, ...] = (),
    ) -> Vocabulary:
        """Return a copy with extra words merged into the defaults."""
        return replace(
            self,
            units=_merge(self.units, units),
            stop_words=self.stop_words | {w.lower() for w in stop_words},
            removable_descriptors=_merge(
                self.removable_descriptors, removable_descriptors
            ),
            prep_descriptors=_merge(self.prep_descriptors, prep_descriptors),
            guards=self.guards + tuple(guards),
        )


def _merge(base: tuple[str, ...], extra) -> tuple[str, ...]:
    seen = set(base)
    merged = list(base)
    for word in extra:
        w = word.strip().lower()
        if w and w not in seen:
            seen.add(w)
            merged.append(w)
    return tuple(merged)


DEFAULT_VOCABULARY = Vocabulary()
