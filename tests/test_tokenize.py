import pytest

from csvframe.errors import ConfigError
from csvframe.io import sanitize, tokenize


def test_tokenize_default_delimiter():
    assert tokenize("1.5, 2.0, 3\n", ", ") == ["1.5", "2.0", "3"]


def test_tokenize_drops_empty_tokens():
    # runs of delimiter characters never produce empty fields
    assert tokenize("a,,b, ,c", ", ") == ["a", "b", "c"]
    assert tokenize(", a, b, ", ", ") == ["a", "b"]


def test_tokenize_strips_line_terminators():
    assert tokenize("x;y\r\n", ";") == ["x", "y"]


def test_tokenize_delimiter_is_character_set():
    assert tokenize("1|2;3", ";|") == ["1", "2", "3"]


@pytest.mark.parametrize("delim", ["-", "]", "^", "\\", "."])
def test_tokenize_regex_metacharacters(delim):
    assert tokenize(f"1{delim}2{delim}3", delim) == ["1", "2", "3"]


def test_tokenize_tab():
    assert tokenize("a\tb\t\tc\n", "\t") == ["a", "b", "c"]


def test_tokenize_blank_line():
    assert tokenize("\n", ", ") == []


def test_tokenize_leaves_input_untouched():
    line = "p, q\n"
    tokenize(line, ", ")
    assert line == "p, q\n"


def test_tokenize_empty_delimiter():
    with pytest.raises(ConfigError):
        tokenize("a,b", "")


def test_sanitize_examples():
    assert sanitize("abc!@123") == "abc123"
    assert sanitize("###") == ""
    assert sanitize("temp\n") == "temp"
    assert sanitize("\ufeffid") == "id"


@pytest.mark.parametrize("token", ["abc!@123", "###", "", "a b-c_d", "x\n", "Feature (1)", "42"])
def test_sanitize_idempotent(token):
    once = sanitize(token)
    assert sanitize(once) == once
    assert all(ch.isalnum() for ch in once)
