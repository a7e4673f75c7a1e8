"""Canonical identity keys for ingredient names.

Each display name gets two keys:

- ``canonical_strict``: tokens in their original order. Used for exact
  inventory matches.
- ``canonical_loose``: the same tokens sorted, so any two names with the same
  token multiset share a key. Used for duplicate grouping and fuzzy matching.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .text.normalizer import NormalizeMode, Normalizer
from .text.vocab import DEFAULT_VOCABULARY, Vocabulary

_MARKS = re.compile("[®™©]")
_QUOTES = re.compile("[\"'`‘’“”]")
_NON_ALNUM = re.compile(r"[\W_]+")


@dataclass(frozen=True)
class NormalizedIngredient:
    display_name: str
    canonical_loose: str
    canonical_strict: str
    tokens: frozenset[str] = field(default_factory=frozenset)

    def to_dict(self) -> dict:
        return {
            "display_name": self.display_name,
            "canonical_loose": self.canonical_loose,
            "canonical_strict": self.canonical_strict,
            "tokens": sorted(self.tokens),
        }


class Canonicalizer:
    """Pure, deterministic display-name → identity conversion."""

    def __init__(self, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> None:
        self._vocab = vocabulary
        self._normalizers: dict[NormalizeMode, Normalizer] = {}

    @property
    def vocabulary(self) -> Vocabulary:
        return self._vocab

    def clean(self, text: str) -> str:
        """Lowercase and reduce to space-separated alphanumeric words."""
        s = text.lower() if isinstance(text, str) else ""
        s = _MARKS.sub("", s)
        s = _QUOTES.sub("", s)
        s = _NON_ALNUM.sub(" ", s)
        return " ".join(s.split())

    def tokenize(self, text: str) -> list[str]:
        """Return the ordered identity tokens of a display name."""
        s = self.clean(text)
        triggered = [g for g in self._vocab.guards if g.matches(s)]
        for guard in triggered:
            s = guard.fuse(s)

        tokens = s.split()
        for guard in triggered:
            tokens = guard.filter_tokens(tokens)
        return [t for t in tokens if t not in self._vocab.stop_words]

    def canonicalize(self, display_name: str) -> NormalizedIngredient:
        display = display_name.strip() if isinstance(display_name, str) else ""
        tokens = self.tokenize(display)
        return NormalizedIngredient(
            display_name=display,
            canonical_loose=" ".join(sorted(tokens)),
            canonical_strict=" ".join(tokens),
            tokens=frozenset(tokens),
        )

    def normalizer(self, mode: NormalizeMode = NormalizeMode.AGGRESSIVE) -> Normalizer:
        """Return a Normalizer sharing this vocabulary."""
        mode = NormalizeMode(mode)
        if mode not in self._normalizers:
            self._normalizers[mode] = Normalizer(self._vocab, mode)
        return self._normalizers[mode]

    def canonicalize_line(
        self, raw: object, mode: NormalizeMode = NormalizeMode.AGGRESSIVE
    ) -> NormalizedIngredient:
        """Normalize a raw line, then canonicalize its display name."""
        return self.canonicalize(self.normalizer(mode).normalize(raw))


_default_canonicalizer: Canonicalizer | None = None


def get_canonicalizer() -> Canonicalizer:
    """Get or create the shared default-vocabulary Canonicalizer."""
    global _default_canonicalizer
    if _default_canonicalizer is None:
        _default_canonicalizer = Canonicalizer()
    return _default_canonicalizer


def canonicalize(display_name: str) -> NormalizedIngredient:
    return get_canonicalizer().canonicalize(display_name)


def canonicalize_line(
    raw: object, mode: NormalizeMode = NormalizeMode.AGGRESSIVE
) -> NormalizedIngredient:
    """Normalize then canonicalize with the default vocabulary."""
    return get_canonicalizer().canonicalize_line(raw, mode)
