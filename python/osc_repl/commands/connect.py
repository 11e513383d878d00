"""Peer selection commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from ..output import emit_result
from .base import Command, CommandArgumentParser

if TYPE_CHECKING:  # pragma: no cover
    from ..context import ConsoleSession


class ConnectCommand(Command):
    def __init__(self) -> None:
        super().__init__("connect", "Send to <ip> <port> from now on")
        self._parser = CommandArgumentParser("connect")
        self._parser.add_argument("ip", help="Peer address")
        self._parser.add_argument("port", type=int, help="Peer UDP port")

    async def run(self, session: "ConsoleSession", argv: List[str]) -> None:
        args = self._parser.parse_args(argv)
        if not 0 < args.port < 65536:
            self._parser.error(f"port out of range: {args.port}")
        peer = session.connect(args.ip, args.port)
        emit_result(
            session,
            message=f"Connecting to {peer}.",
            data={"result": "connected", "ip": peer.ip, "port": peer.port},
        )


class DisconnectCommand(Command):
    def __init__(self) -> None:
        super().__init__("disconnect", "Forget the current peer")
        self._parser = CommandArgumentParser("disconnect")

    async def run(self, session: "ConsoleSession", argv: List[str]) -> None:
        self._parser.parse_args(argv)
        peer = session.disconnect()
        if peer is None:
            emit_result(session, message="Not connected to any peer at the moment", data={"result": "idle"})
            return
        emit_result(
            session,
            message=f"Disconnecting from {peer}.",
            data={"result": "disconnected", "ip": peer.ip, "port": peer.port},
        )
