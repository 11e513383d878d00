"""Typed protocol values and the tag-driven parser/formatter registry."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Mapping, Optional

from .errors import UnknownTypeTag, UsageError
from .parser import parse_bool, parse_float, parse_int_or_mask, take

if TYPE_CHECKING:  # pragma: no cover
    from .context import ConsoleSession

LOGGER = logging.getLogger("osc_repl.values")

PLACEHOLDER = "?"


@dataclass(frozen=True)
class TypedValue:
    """One protocol argument: a single-character type tag plus its value."""

    tag: str
    value: Any = None


Parser = Callable[[Optional["ConsoleSession"], List[str]], TypedValue]
Formatter = Callable[[Optional["ConsoleSession"], Any], str]


def _check_tag(tag: str) -> str:
    if not isinstance(tag, str) or len(tag) != 1 or not tag.isprintable() or tag.isspace():
        raise ValueError(f"type tag must be a single printable character, got {tag!r}")
    return tag


class TypeRegistry:
    """Maps type tags to parsers (text -> value) and formatters (value -> text)."""

    def __init__(
        self,
        parsers: Optional[Mapping[str, Parser]] = None,
        formatters: Optional[Mapping[str, Formatter]] = None,
    ) -> None:
        self._parsers: Dict[str, Parser] = {}
        self._formatters: Dict[str, Formatter] = {}
        if parsers:
            self.register_parsers(parsers)
        if formatters:
            self.register_formatters(formatters)

    def register_parser(self, tag: str, parser: Parser) -> None:
        self._parsers[_check_tag(tag)] = parser

    def register_formatter(self, tag: str, formatter: Formatter) -> None:
        self._formatters[_check_tag(tag)] = formatter

    def register_parsers(self, parsers: Mapping[str, Parser]) -> None:
        for tag, parser in parsers.items():
            self.register_parser(tag, parser)

    def register_formatters(self, formatters: Mapping[str, Formatter]) -> None:
        for tag, formatter in formatters.items():
            self.register_formatter(tag, formatter)

    def has_parser(self, tag: str) -> bool:
        return tag in self._parsers

    def has_formatter(self, tag: str) -> bool:
        return tag in self._formatters

    @property
    def parser_tags(self) -> List[str]:
        return sorted(self._parsers)

    def parse(self, tag: str, values: List[str], session: Optional["ConsoleSession"] = None) -> TypedValue:
        """Parse one value of type *tag*, consuming tokens from the front of *values*."""
        parser = self._parsers.get(tag)
        if parser is None:
            raise UnknownTypeTag(tag)
        return parser(session, values)

    def parse_args(
        self,
        types: Optional[str],
        values: List[str],
        session: Optional["ConsoleSession"] = None,
    ) -> Optional[List[TypedValue]]:
        """Parse every tag in *types* in order; ``None`` when no tags are given."""
        if not types:
            return None
        args = [self.parse(tag, values, session) for tag in types]
        if values:
            LOGGER.debug("ignoring %d surplus value(s): %s", len(values), values)
        return args

    def format(self, value: TypedValue, session: Optional["ConsoleSession"] = None) -> str:
        formatter = self._formatters.get(value.tag)
        if formatter is None:
            return PLACEHOLDER
        return formatter(session, value.value)

    def format_args(
        self, args: Iterable[TypedValue], session: Optional["ConsoleSession"] = None
    ) -> List[str]:
        return [self.format(arg, session) for arg in args]


def _parse_string(session, values: List[str]) -> TypedValue:
    return TypedValue("s", take(values))


def _parse_int(session, values: List[str]) -> TypedValue:
    number = parse_int_or_mask(take(values))
    if not -(2**31) <= number < 2**31:
        raise UsageError(f"Integer out of 32-bit range: {number}")
    return TypedValue("i", number)


def _parse_float(session, values: List[str]) -> TypedValue:
    return TypedValue("f", parse_float(take(values)))


def _parse_bool(session, values: List[str]) -> TypedValue:
    return TypedValue("B", parse_bool(take(values)))


def _parse_null(session, values: List[str]) -> TypedValue:
    return TypedValue("N", None)


def _format_string(session, value: str) -> str:
    escaped = value.replace('"', '\\"')
    return f'"{escaped}"'


def _format_number(session, value: float) -> str:
    return f"{value:.7g}"


def _format_blob(session, value: bytes) -> str:
    if session is not None and session.print_buffers:
        return value.hex()
    return f"<{len(value)}B>"


DEFAULT_PARSERS: Dict[str, Parser] = {
    "s": _parse_string,
    "i": _parse_int,
    "f": _parse_float,
    "B": _parse_bool,
    "N": _parse_null,
}

DEFAULT_FORMATTERS: Dict[str, Formatter] = {
    "s": _format_string,
    "i": lambda session, value: str(value),
    "h": lambda session, value: str(value),
    "f": _format_number,
    "d": _format_number,
    "B": lambda session, value: "true" if value else "false",
    "N": lambda session, value: "null",
    "b": _format_blob,
}


def default_registry() -> TypeRegistry:
    return TypeRegistry(DEFAULT_PARSERS, DEFAULT_FORMATTERS)


__all__ = [
    "TypedValue",
    "TypeRegistry",
    "Parser",
    "Formatter",
    "DEFAULT_PARSERS",
    "DEFAULT_FORMATTERS",
    "PLACEHOLDER",
    "default_registry",
]
