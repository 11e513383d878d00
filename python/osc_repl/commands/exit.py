"""Quit command."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from .base import Command

if TYPE_CHECKING:  # pragma: no cover
    from ..context import ConsoleSession


class QuitCommand(Command):
    def __init__(self) -> None:
        super().__init__("quit", "Leave the console", aliases=("exit", "q"))

    async def run(self, session: "ConsoleSession", argv: List[str]) -> None:
        print("Bye!")
        await session.terminate()
