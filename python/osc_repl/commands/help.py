"""Help command."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from .base import Command

if TYPE_CHECKING:  # pragma: no cover
    from ..context import ConsoleSession


class HelpCommand(Command):
    def __init__(self) -> None:
        super().__init__("help", "Show available commands", aliases=("?",))

    async def run(self, session: "ConsoleSession", argv: List[str]) -> None:
        registry = session.commands
        print("Send a message:  <address> [<types> <values...>]   e.g. /ch/01/mix/fader f 0.75")
        print(f"Known types: {' '.join(session.types.parser_tags)}")
        print("Commands:")
        for command in registry.list_commands():
            print(f"  {command.format_help()}")
