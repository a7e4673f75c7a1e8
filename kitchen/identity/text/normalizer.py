"""Free-text ingredient line cleanup.

Turns receipt lines, recipe ingredient lines and typed lines into a clean
display name. One pipeline serves two modes:

- ``AGGRESSIVE`` (receipt entry): every descriptor clause is removed.
- ``IDENTITY`` (shopping-list identity): preparation descriptors such as
  "shredded" survive so they remain part of the item's identity.
"""

from __future__ import annotations

import enum
import logging
import re

from .vocab import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

_FRACTION_CHARS: dict[str, str] = {
    "¼": " 1/4 ",
    "½": " 1/2 ",
    "¾": " 3/4 ",
    "⅓": " 1/3 ",
    "⅔": " 2/3 ",
    "⅛": " 1/8 ",
    "⅜": " 3/8 ",
    "⅝": " 5/8 ",
    "⅞": " 7/8 ",
}
_FRACTION_SLASHES = re.compile("[⁄∕／]")

_BULLET = re.compile(r"^[-•*·]+\s*")
_LEADING_OF = re.compile(r"^of\s+", re.IGNORECASE)
_ORPHAN_DENOMINATOR = re.compile(r"^/\d+\s*")
_TRAILING_PUNCT = re.compile(r"[,\-–—:\s]+$")
_TRAILING_NUMBER = re.compile(r"\s*,?\s*\d+(?:\.\d+)?\s*$")
_TRAILING_PAREN_NUMBER = re.compile(r"\s*\(\s*\d+[^)]*\)\s*$")
_TRAILING_MULTIPLIER = re.compile(r"\s*,?\s*\d+\s*[x×]\s*$", re.IGNORECASE)

# Words that can pad a note clause ("at room temperature", "or more if needed")
_FILLER_WORDS: frozenset[str] = frozenset({
    "or", "if", "at", "as", "plus", "more", "extra", "needed", "desired",
    "lightly", "well", "very", "about",
})


class NormalizeMode(str, enum.Enum):
    AGGRESSIVE = "aggressive"
    IDENTITY = "identity"


def _word_alternation(words) -> str:
    # Longest first so "tablespoons" wins over "tablespoon"
    ordered = sorted({w for w in words if w}, key=len, reverse=True)
    return "|".join(re.escape(w).replace(r"\ ", r"\s+") for w in ordered)


class Normalizer:
    """Strips quantities, units, package sizes and note clauses from a line."""

    def __init__(
        self,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
        mode: NormalizeMode = NormalizeMode.AGGRESSIVE,
    ) -> None:
        self._vocab = vocabulary
        self._mode = NormalizeMode(mode)

        units = _word_alternation(vocabulary.units)
        sizes = _word_alternation(vocabulary.size_units)
        packs = _word_alternation(vocabulary.pack_words)

        # A leading number must end at a space, the end, or a unit ("12oz"),
        # so "2% milk" and "7up" keep their digits
        end = rf"(?=\s|$|(?:{units})\b)"
        self._leading_qty = (
            re.compile(rf"^\d+\s+\d+/\d+{end}\s*", re.IGNORECASE),  # "1 1/2"
            re.compile(rf"^\d+/\d+{end}\s*", re.IGNORECASE),  # "1/2"
            re.compile(  # "2", "1.5", "2 x"
                rf"^\d+(?:\.\d+)?(?:\s*[x×](?=\s))?{end}\s*", re.IGNORECASE
            ),
        )
        self._leading_unit = re.compile(rf"^(?:{units})\b\.?\s*", re.IGNORECASE)
        self._leading_pinch_of = re.compile(r"^(?:pinch|dash)\s+of\s+", re.IGNORECASE)
        self._trailing_sizes = (
            # ranges "2-3 kg"
            re.compile(
                rf"\s*,?\s*\d+(?:\.\d+)?\s*-\s*\d+(?:\.\d+)?\s*(?:{sizes})\b\.?\s*$",
                re.IGNORECASE,
            ),
            # multiplicative "6 x 710 ml"
            re.compile(
                rf"\s*,?\s*\d+(?:\.\d+)?\s*[x×]\s*\d*(?:\.\d+)?\s*(?:{sizes})\b\.?\s*$",
                re.IGNORECASE,
            ),
            # single "500 g" / "500g"
            re.compile(
                rf"\s*,?\s*\d+(?:\.\d+)?\s*(?:{sizes})\b\.?\s*$", re.IGNORECASE
            ),
            # pack counts "6 pack"
            re.compile(rf"\s*,?\s*\d+\s*(?:{packs})\b\.?\s*$", re.IGNORECASE),
        )
        self._tail_notes = tuple(
            re.compile(rf"\s*,?\s*{p}$", re.IGNORECASE) for p in vocabulary.tail_notes
        )
        self._pure_meta = (
            re.compile(rf"^\d+(?:\.\d+)?\s*(?:{sizes})\b\.?$", re.IGNORECASE),
            re.compile(rf"^\d+\s*(?:{packs})\b\.?$", re.IGNORECASE),
            re.compile(r"^\d+\s*[x×]?$", re.IGNORECASE),
            re.compile(r"^\d+(?:\.\d+)?\s*-\s*\d+(?:\.\d+)?\s*\w*$"),
        )
        self._removable = re.compile(
            rf"\b(?:{_word_alternation(vocabulary.removable_descriptors)})\b",
            re.IGNORECASE,
        )
        self._prep = re.compile(
            rf"\b(?:{_word_alternation(vocabulary.prep_descriptors)})\b",
            re.IGNORECASE,
        )

    @property
    def mode(self) -> NormalizeMode:
        return self._mode

    def normalize(self, raw: object) -> str:
        """Return the display name for a raw line.

        Never raises. Non-string input gives ``""``; a non-blank line never
        normalizes to ``""`` (the trimmed input is returned instead).
        """
        if not isinstance(raw, str):
            return ""

        original = _collapse(raw.replace("\u00a0", " "))
        if not original:
            return ""

        s = self._replace_fractions(original)
        s = self._strip_leading_quantity(s)
        s = self._strip_leading_unit(s)
        s = _LEADING_OF.sub("", s).strip()
        s = self._strip_trailing_sizes(s)
        s = self._strip_clauses(s)
        s = _collapse(s)

        if not s:
            logger.debug("normalize emptied %r, keeping original", original)
            return original
        return s

    # -- pipeline steps ----------------------------------------------------

    @staticmethod
    def _replace_fractions(s: str) -> str:
        s = _FRACTION_SLASHES.sub("/", s)
        for glyph, ascii_form in _FRACTION_CHARS.items():
            s = s.replace(glyph, ascii_form)
        # "1 ½" became "1  1/2 "; "1½" became "1 1/2 "
        return _collapse(s)

    def _strip_leading_quantity(self, s: str) -> str:
        s = _BULLET.sub("", s).strip()
        for pattern in self._leading_qty:
            m = pattern.match(s)
            if m:
                s = s[m.end():]
                break
        return s.strip()

    def _strip_leading_unit(self, s: str) -> str:
        # Only strip when something follows: a bare "can" is the item itself
        m = self._leading_unit.match(s)
        if m and s[m.end():].strip():
            s = s[m.end():]
        s = self._leading_pinch_of.sub("", s)
        s = _ORPHAN_DENOMINATOR.sub("", s)
        return s.strip()

    def _strip_trailing_sizes(self, s: str) -> str:
        s = _trim_tail(s)
        for pattern in self._tail_notes:
            s = _trim_tail(pattern.sub("", s))
        for pattern in self._trailing_sizes:
            s = _trim_tail(pattern.sub("", s))
        s = _trim_tail(_TRAILING_MULTIPLIER.sub("", s))

        if _TRAILING_PAREN_NUMBER.search(s):
            s = _trim_tail(_TRAILING_PAREN_NUMBER.sub("", s))

        # A stray number at the end, as long as a name remains in front of it
        if re.search(r"(?:,|\s)\d+(?:\.\d+)?\s*$", s) and re.search(r"[A-Za-z]", s):
            s = _trim_tail(_TRAILING_NUMBER.sub("", s))
        return s

    def _strip_clauses(self, s: str) -> str:
        parts = [p.strip() for p in s.split(",")]
        parts = [p for p in parts if p]
        if len(parts) <= 1:
            return s

        head, rest = parts[0], parts[1:]
        kept = [p for p in rest if not self._is_droppable(p)]
        return ", ".join([head] + kept)

    def _is_droppable(self, clause: str) -> bool:
        if any(p.match(clause) for p in self._pure_meta):
            return True
        if self._mode is NormalizeMode.IDENTITY:
            return self._is_note(clause)
        return bool(self._prep.search(clause) or self._removable.search(clause))

    def _is_note(self, clause: str) -> bool:
        """A clause made only of removable descriptors and filler words."""
        if not self._removable.search(clause):
            return False
        rest = self._removable.sub(" ", clause).lower()
        return all(
            w in self._vocab.stop_words or w in _FILLER_WORDS
            for w in re.findall(r"[a-z]+", rest)
        )


def _collapse(s: str) -> str:
    return re.sub(r"\s+", " ", s).strip()


def _trim_tail(s: str) -> str:
    return _TRAILING_PUNCT.sub("", s).strip()


_default_normalizers: dict[NormalizeMode, Normalizer] = {}


def get_normalizer(mode: NormalizeMode = NormalizeMode.AGGRESSIVE) -> Normalizer:
    """Get or create the shared default-vocabulary normalizer for a mode."""
    mode = NormalizeMode(mode)
    if mode not in _default_normalizers:
        _default_normalizers[mode] = Normalizer(DEFAULT_VOCABULARY, mode)
    return _default_normalizers[mode]


def normalize(raw: object, mode: NormalizeMode = NormalizeMode.AGGRESSIVE) -> str:
    """Normalize a raw line with the default vocabulary."""
    return get_normalizer(mode).normalize(raw)
