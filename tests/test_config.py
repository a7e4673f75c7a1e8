"""Tests for identity engine config loading."""

import pytest

from kitchen.identity.canonical import Canonicalizer
from kitchen.identity.config import CONFIG_ENV_VAR, EngineConfig, load_config
from kitchen.identity.errors import ConfigError
from kitchen.identity.text.normalizer import NormalizeMode
from kitchen.identity.text.vocab import DEFAULT_VOCABULARY


@pytest.fixture(autouse=True)
def no_env_config(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


def _write(tmp_path, content):
    path = tmp_path / "identity.toml"
    path.write_text(content, encoding="utf-8")
    return path


def test_load_config_defaults():
    """Loading with no path returns all defaults."""
    config = load_config()
    assert isinstance(config, EngineConfig)
    assert config.normalizer.mode is NormalizeMode.AGGRESSIVE
    assert config.matching.loose_limit == 4
    assert config.substitutes.limit == 3
    assert config.receipts.max_items == 160
    assert config.vocabulary() is DEFAULT_VOCABULARY


def test_load_config_nonexistent_file():
    """Loading a nonexistent file returns defaults."""
    config = load_config("/nonexistent/path.toml")
    assert config.matching.loose_limit == 4


def test_load_config_from_toml(tmp_path):
    path = _write(tmp_path, """\
[normalizer]
mode = "identity"

[matching]
loose_limit = 6

[substitutes]
limit = 5

[receipts]
max_items = 50
""")
    config = load_config(path)
    assert config.normalizer.mode is NormalizeMode.IDENTITY
    assert config.matching.loose_limit == 6
    assert config.substitutes.limit == 5
    assert config.receipts.max_items == 50


def test_partial_toml_keeps_defaults(tmp_path):
    path = _write(tmp_path, "[matching]\nloose_limit = 2\n")
    config = load_config(path)
    assert config.matching.loose_limit == 2
    assert config.substitutes.limit == 3
    assert config.normalizer.mode is NormalizeMode.AGGRESSIVE


def test_env_var_path(tmp_path, monkeypatch):
    path = _write(tmp_path, "[substitutes]\nlimit = 1\n")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    assert load_config().substitutes.limit == 1


def test_explicit_path_beats_env_var(tmp_path, monkeypatch):
    env_path = _write(tmp_path, "[substitutes]\nlimit = 1\n")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(env_path))
    other = tmp_path / "other.toml"
    other.write_text("[substitutes]\nlimit = 2\n", encoding="utf-8")
    assert load_config(other).substitutes.limit == 2


def test_vocabulary_merged_with_defaults(tmp_path):
    path = _write(tmp_path, """\
[vocabulary]
extra_units = ["bunch"]
extra_stop_words = ["Organic"]
extra_removable_descriptors = ["sifted twice"]
""")
    vocab = load_config(path).vocabulary()
    assert "bunch" in vocab.units
    assert "cup" in vocab.units
    assert "organic" in vocab.stop_words
    assert "sifted twice" in vocab.removable_descriptors

    canon = Canonicalizer(vocab)
    assert canon.canonicalize_line("1 bunch cilantro").display_name == "cilantro"
    assert canon.canonicalize("Organic Milk").canonical_strict == "milk"


class TestInvalidConfig:
    def test_unknown_mode(self, tmp_path):
        path = _write(tmp_path, '[normalizer]\nmode = "gentle"\n')
        with pytest.raises(ConfigError):
            load_config(path)

    def test_non_positive_limit(self, tmp_path):
        path = _write(tmp_path, "[matching]\nloose_limit = 0\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_bool_limit(self, tmp_path):
        path = _write(tmp_path, "[substitutes]\nlimit = true\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_word_list_type(self, tmp_path):
        path = _write(tmp_path, '[vocabulary]\nextra_units = "bunch"\n')
        with pytest.raises(ConfigError):
            load_config(path)

    def test_section_not_a_table(self, tmp_path):
        path = _write(tmp_path, "matching = 3\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_malformed_toml(self, tmp_path):
        path = _write(tmp_path, "[matching\n")
        with pytest.raises(ConfigError):
            load_config(path)
