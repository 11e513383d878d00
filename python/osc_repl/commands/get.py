"""Query command: ask the peer for the current value of an address."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from ..output import emit_result
from .base import Command, CommandArgumentParser

if TYPE_CHECKING:  # pragma: no cover
    from ..context import ConsoleSession


class GetCommand(Command):
    def __init__(self) -> None:
        super().__init__("get", "Probe <address> until the peer reports a value", aliases=("query",))
        parser = CommandArgumentParser("get")
        parser.add_argument("address", help="OSC address")
        parser.add_argument("tag", nargs="?", default="f", help="Expected type tag (default f)")
        parser.add_argument("--timeout", type=float, help="Seconds to wait for a reply")
        self._parser = parser

    async def run(self, session: "ConsoleSession", argv: List[str]) -> None:
        args = self._parser.parse_args(argv)
        if len(args.tag) != 1:
            self._parser.error(f"type tag must be one character, got {args.tag!r}")
        value = await session.query(args.address, args.tag, args.timeout)
        text = session.types.format(value, session)
        emit_result(
            session,
            message=f"{args.address} = {text}",
            data={"address": args.address, "tag": value.tag, "value": text},
        )
