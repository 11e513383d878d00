"""Blob rendering toggle."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from ..output import emit_result
from ..parser import parse_bool
from .base import Command, CommandArgumentParser

if TYPE_CHECKING:  # pragma: no cover
    from ..context import ConsoleSession


class BuffersCommand(Command):
    def __init__(self) -> None:
        super().__init__("buffers", "Show blob arguments as hex (on) or as a byte count (off)")
        parser = CommandArgumentParser("buffers")
        parser.add_argument("state", metavar="on|off")
        self._parser = parser

    async def run(self, session: "ConsoleSession", argv: List[str]) -> None:
        args = self._parser.parse_args(argv)
        session.print_buffers = parse_bool(args.state)
        state = "on" if session.print_buffers else "off"
        emit_result(session, message=f"Verbose buffers are {state}.", data={"buffers": session.print_buffers})
