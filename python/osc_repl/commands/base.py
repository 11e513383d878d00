"""Command base classes for osc-repl."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, NoReturn, Optional, Sequence

from ..errors import UsageError

if TYPE_CHECKING:  # pragma: no cover
    from ..context import ConsoleSession

SIGIL = "@"


class CommandArgumentParser(argparse.ArgumentParser):
    """argparse parser that reports problems as :class:`UsageError`."""

    def __init__(self, name: str, **kwargs) -> None:
        super().__init__(prog=f"{SIGIL}{name}", add_help=False, **kwargs)

    def error(self, message: str) -> NoReturn:
        raise UsageError(f"{self.format_usage().strip()} ({message})")

    def exit(self, status: int = 0, message: Optional[str] = None) -> NoReturn:
        raise UsageError(message.strip() if message else self.format_usage().strip())


@dataclass
class Command:
    """Abstract command description."""

    name: str
    description: str
    aliases: Sequence[str] = field(default_factory=tuple)

    async def run(self, session: "ConsoleSession", argv: List[str]) -> None:
        raise NotImplementedError("Command must implement run()")

    def format_help(self) -> str:
        return f"{SIGIL}{self.name:<12} {self.description}"
