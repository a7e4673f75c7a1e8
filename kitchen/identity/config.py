"""TOML configuration loader for the identity engine."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigError
from .matching import DEFAULT_LOOSE_LIMIT
from .receipts.parser import DEFAULT_MAX_ITEMS
from .substitutes import DEFAULT_LIMIT
from .text.normalizer import NormalizeMode
from .text.vocab import DEFAULT_VOCABULARY, Vocabulary

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

CONFIG_ENV_VAR = "KITCHEN_IDENTITY_CONFIG"


@dataclass
class NormalizerConfig:
    mode: NormalizeMode = NormalizeMode.AGGRESSIVE


@dataclass
class VocabularyConfig:
    """Words added on top of the built-in vocabulary."""

    extra_units: list[str] = field(default_factory=list)
    extra_stop_words: list[str] = field(default_factory=list)
    extra_removable_descriptors: list[str] = field(default_factory=list)


@dataclass
class MatchingConfig:
    loose_limit: int = DEFAULT_LOOSE_LIMIT


@dataclass
class SubstitutesConfig:
    limit: int = DEFAULT_LIMIT


@dataclass
class ReceiptsConfig:
    max_items: int = DEFAULT_MAX_ITEMS


@dataclass
class EngineConfig:
    normalizer: NormalizerConfig = field(default_factory=NormalizerConfig)
    vocabulary_words: VocabularyConfig = field(default_factory=VocabularyConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    substitutes: SubstitutesConfig = field(default_factory=SubstitutesConfig)
    receipts: ReceiptsConfig = field(default_factory=ReceiptsConfig)

    def vocabulary(self) -> Vocabulary:
        """Build the immutable vocabulary: defaults plus configured extras."""
        words = self.vocabulary_words
        if not (
            words.extra_units
            or words.extra_stop_words
            or words.extra_removable_descriptors
        ):
            return DEFAULT_VOCABULARY
        return DEFAULT_VOCABULARY.extended(
            units=words.extra_units,
            stop_words=words.extra_stop_words,
            removable_descriptors=words.extra_removable_descriptors,
        )


def load_config(path: str | Path | None = None) -> EngineConfig:
    """Load configuration from a TOML file.

    Without a path, ``$KITCHEN_IDENTITY_CONFIG`` is used if set. Falls back to
    defaults if no file is found; missing keys keep their defaults.

    Raises:
        ConfigError: A value has the wrong type or an unknown mode.
    """
    raw: dict = {}

    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or None

    if path is not None:
        p = Path(path).expanduser()
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                try:
                    raw = tomllib.load(f)
                except tomllib.TOMLDecodeError as e:
                    raise ConfigError(f"{p}: {e}") from e

    nrm = _section(raw, "normalizer")
    voc = _section(raw, "vocabulary")
    mtc = _section(raw, "matching")
    sub = _section(raw, "substitutes")
    rcp = _section(raw, "receipts")

    mode_value = nrm.get("mode", NormalizeMode.AGGRESSIVE.value)
    try:
        mode = NormalizeMode(str(mode_value).lower())
    except ValueError:
        raise ConfigError(
            f"normalizer.mode must be one of "
            f"{[m.value for m in NormalizeMode]}, got {mode_value!r}"
        ) from None

    return EngineConfig(
        normalizer=NormalizerConfig(mode=mode),
        vocabulary_words=VocabularyConfig(
            extra_units=_word_list(voc, "extra_units"),
            extra_stop_words=_word_list(voc, "extra_stop_words"),
            extra_removable_descriptors=_word_list(voc, "extra_removable_descriptors"),
        ),
        matching=MatchingConfig(
            loose_limit=_positive_int(mtc, "matching.loose_limit", DEFAULT_LOOSE_LIMIT),
        ),
        substitutes=SubstitutesConfig(
            limit=_positive_int(sub, "substitutes.limit", DEFAULT_LIMIT),
        ),
        receipts=ReceiptsConfig(
            max_items=_positive_int(rcp, "receipts.max_items", DEFAULT_MAX_ITEMS),
        ),
    )


def _section(raw: dict, name: str) -> dict:
    value = raw.get(name, {})
    if not isinstance(value, dict):
        raise ConfigError(f"[{name}] must be a table")
    return value


def _word_list(section: dict, key: str) -> list[str]:
    value = section.get(key, [])
    if not isinstance(value, list) or not all(isinstance(w, str) for w in value):
        raise ConfigError(f"vocabulary.{key} must be a list of strings")
    return [w.strip().lower() for w in value if w.strip()]


def _positive_int(section: dict, name: str, default: int) -> int:
    key = name.rsplit(".", 1)[-1]
    value = section.get(key, default)
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"{name} must be a positive integer, got {value!r}")
    return value
