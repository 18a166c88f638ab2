import pytest

from process_killer.config import ConfigurationError, runtime
from process_killer.config.runtime_helpers import DotenvLoader, ListNormalizer


def test_load_default_values_prefers_first_source(monkeypatch, tmp_path):
    first = tmp_path / "first.env"
    first.write_text("PROCESS_KILLER_SIGNAL=SIGTERM\nSHARED=first\n")
    second = tmp_path / "second.env"
    second.write_text("SHARED=second\nOTHER=3\n")

    monkeypatch.setattr(runtime, "_DOTENV_CANDIDATES", (first, second))

    defaults = runtime._load_default_values()
    assert defaults == {"PROCESS_KILLER_SIGNAL": "SIGTERM", "SHARED": "first", "OTHER": "3"}
    # Cached value is reused without re-reading files
    assert runtime._load_default_values() is defaults


def test_env_str_uses_defaults_and_handles_blanks(monkeypatch):
    runtime._DEFAULT_VALUES = {"FALLBACK": " spaced ", "BLANK_DEFAULT": "  "}
    monkeypatch.delenv("FALLBACK", raising=False)
    assert runtime.env_str("FALLBACK") == "spaced"

    monkeypatch.setenv("FALLBACK", "  ")
    assert runtime.env_str("FALLBACK") == "spaced"

    monkeypatch.delenv("BLANK_DEFAULT", raising=False)
    assert runtime.env_str("BLANK_DEFAULT", or_value="used") == "used"


def test_env_int_and_float_validation(monkeypatch):
    monkeypatch.setenv("INT_VALUE", "7")
    assert runtime.env_int("INT_VALUE") == 7

    monkeypatch.delenv("INT_UNSET", raising=False)
    assert runtime.env_int("INT_UNSET", or_value=3) == 3

    monkeypatch.setenv("INT_INVALID", "abc")
    with pytest.raises(ConfigurationError):
        runtime.env_int("INT_INVALID")

    monkeypatch.setenv("FLOAT_VALUE", "2.5")
    assert runtime.env_float("FLOAT_VALUE") == 2.5

    monkeypatch.setenv("FLOAT_INVALID", "five")
    with pytest.raises(ConfigurationError):
        runtime.env_float("FLOAT_INVALID")

    monkeypatch.delenv("FLOAT_DEFAULT", raising=False)
    assert runtime.env_float("FLOAT_DEFAULT", or_value=1.5) == 1.5


def test_env_bool_accepts_truthy_and_falsy(monkeypatch):
    monkeypatch.setenv("BOOL_TRUE", "YeS")
    assert runtime.env_bool("BOOL_TRUE") is True

    monkeypatch.setenv("BOOL_FALSE", "0")
    assert runtime.env_bool("BOOL_FALSE") is False

    monkeypatch.setenv("BOOL_INVALID", "perhaps")
    with pytest.raises(ConfigurationError):
        runtime.env_bool("BOOL_INVALID")


def test_env_list_handles_defaults_and_uniqueness(monkeypatch):
    monkeypatch.delenv("LIST_NONE", raising=False)
    assert runtime.env_list("LIST_NONE") == ()
    assert runtime.env_list("LIST_NONE", or_value=("1",)) == ("1",)

    monkeypatch.setenv("LIST_VALUES", "a, b ,a")
    assert runtime.env_list("LIST_VALUES") == ("a", "b")

    monkeypatch.setenv("LIST_EMPTY_AFTER_NORMALIZE", " , ")
    assert runtime.env_list("LIST_EMPTY_AFTER_NORMALIZE") == ()


def test_dotenv_loader_parses_quotes_comments_and_export(tmp_path):
    path = tmp_path / ".env"
    path.write_text("# comment\n\nexport PROCESS_KILLER_QUEUE_SIZE=10\nQUOTED='a b'\nnot a pair\n")

    assert DotenvLoader.load_from_file(path) == {"PROCESS_KILLER_QUEUE_SIZE": "10", "QUOTED": "a b"}
    assert DotenvLoader.load_from_file(tmp_path / "missing.env") == {}


def test_list_normalizer_strips_and_deduplicates():
    assert ListNormalizer.split_and_normalize(" a,, b ,") == ["a", "b"]
    assert ListNormalizer.deduplicate_preserving_order(["b", "a", "b"]) == ("b", "a")
