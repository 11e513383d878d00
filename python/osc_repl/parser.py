"""Lightweight line and value parsing helpers for osc-repl."""

from __future__ import annotations

import re
from typing import List

from .errors import MissingArgument, UsageError

# A quoted run is one token; an unbalanced quote falls through to \S+.
_TOKEN_RE = re.compile(r""""[^"]*"|'[^']*'|\S+""")
_FALSE_RE = re.compile(r"^(f|false|off|n|no|0|)$", re.IGNORECASE)

BINARY_MARKER = "%"


def tokenize(line: str) -> List[str]:
    """Split an input line into tokens, honouring single and double quotes."""
    if not line:
        return []
    tokens: List[str] = []
    for match in _TOKEN_RE.finditer(line.strip()):
        token = match.group(0)
        if len(token) >= 2 and token[0] in "\"'" and token[-1] == token[0]:
            token = token[1:-1]
        tokens.append(token)
    return tokens


def take(values: List[str]) -> str:
    """Consume the next raw value from the front of *values*."""
    if not values:
        raise MissingArgument()
    return values.pop(0)


def parse_bool(value: str) -> bool:
    return not _FALSE_RE.match(value)


def parse_int_or_mask(value: str) -> int:
    """Parse a decimal integer, or a binary literal prefixed with ``%``."""
    try:
        if value.startswith(BINARY_MARKER):
            return int(value[len(BINARY_MARKER) :], 2)
        return int(value, 10)
    except ValueError:
        raise UsageError(f"Invalid integer: {value!r}") from None


def parse_float(value: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise UsageError(f"Invalid number: {value!r}") from None


__all__ = ["tokenize", "take", "parse_bool", "parse_int_or_mask", "parse_float", "BINARY_MARKER"]
