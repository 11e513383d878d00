"""Repeating send commands."""

from __future__ import annotations

import argparse
from typing import TYPE_CHECKING, List, Optional

from ..output import emit_result
from .base import Command, CommandArgumentParser

if TYPE_CHECKING:  # pragma: no cover
    from ..context import ConsoleSession


class EveryCommand(Command):
    def __init__(self) -> None:
        super().__init__("every", "Resend a message every <interval> seconds", aliases=("repeat",))
        parser = CommandArgumentParser("every")
        parser.add_argument("interval", type=float, help="Seconds between sends")
        parser.add_argument("address", help="OSC address")
        parser.add_argument("types", nargs="?", help="Type tags, e.g. 'if'")
        parser.add_argument("values", nargs=argparse.REMAINDER, help="One value per tag")
        self._parser = parser

    async def run(self, session: "ConsoleSession", argv: List[str]) -> None:
        args = self._parser.parse_args(argv)
        if args.interval <= 0:
            self._parser.error("interval must be positive")
        payload = session.parse_args(args.types, args.values)
        address = args.address

        async def resend(elapsed: float) -> Optional[bool]:
            await session.send(address, payload)
            return None

        await session.send(address, payload)
        session.schedule(address, args.interval, resend, immediate=False)
        emit_result(session, message="Timer set.", data={"key": address, "interval": args.interval})


class StopCommand(Command):
    def __init__(self) -> None:
        super().__init__("stop", "Stop the timer or effect on <address> (default: the last one started)")
        parser = CommandArgumentParser("stop")
        parser.add_argument("address", nargs="?", help="OSC address the task was started on")
        self._parser = parser

    async def run(self, session: "ConsoleSession", argv: List[str]) -> None:
        args = self._parser.parse_args(argv)
        stopped = session.stop(args.address)
        if stopped is None:
            target = args.address or "the last address"
            emit_result(session, message=f"No timer running for {target}.", data={"key": None})
            return
        emit_result(session, message=f"Timer cleared ({stopped}).", data={"key": stopped})
