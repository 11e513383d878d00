"""Tests for osc-repl line and value parsing helpers."""

from __future__ import annotations

import pytest

from osc_repl.errors import MissingArgument, UsageError
from osc_repl.parser import parse_bool, parse_float, parse_int_or_mask, take, tokenize


def test_tokenize_command_line():
    assert tokenize("@fade 1 /x in") == ["@fade", "1", "/x", "in"]


def test_tokenize_strips_quotes_and_keeps_spaces():
    assert tokenize('"a b" c') == ["a b", "c"]
    assert tokenize("/name s 'Lead Vox'") == ["/name", "s", "Lead Vox"]


def test_tokenize_empty_and_blank_lines():
    assert tokenize("") == []
    assert tokenize("   \t ") == []


def test_tokenize_unbalanced_quote_splits_on_whitespace():
    assert tokenize('/x s "abc def') == ["/x", "s", '"abc', "def"]


def test_take_consumes_from_front():
    values = ["1", "2"]
    assert take(values) == "1"
    assert values == ["2"]
    take(values)
    with pytest.raises(MissingArgument):
        take(values)


@pytest.mark.parametrize("text", ["f", "FALSE", "off", "n", "No", "0", ""])
def test_parse_bool_false_words(text):
    assert parse_bool(text) is False


@pytest.mark.parametrize("text", ["yes", "true", "1", "on", "anything"])
def test_parse_bool_true_otherwise(text):
    assert parse_bool(text) is True


def test_parse_int_supports_binary_marker():
    assert parse_int_or_mask("%101") == 5
    assert parse_int_or_mask("-12") == -12
    with pytest.raises(UsageError):
        parse_int_or_mask("%102")
    with pytest.raises(UsageError):
        parse_int_or_mask("1.5")


def test_parse_float_rejects_garbage():
    assert parse_float("2.5") == 2.5
    with pytest.raises(UsageError):
        parse_float("loud")
