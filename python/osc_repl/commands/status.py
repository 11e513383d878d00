"""Session status command."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from ..output import emit_result
from .base import Command, CommandArgumentParser

if TYPE_CHECKING:  # pragma: no cover
    from ..context import ConsoleSession


class StatusCommand(Command):
    def __init__(self) -> None:
        super().__init__("status", "Show peer, running timers and subscriptions", aliases=("info",))
        self._parser = CommandArgumentParser("status")

    async def run(self, session: "ConsoleSession", argv: List[str]) -> None:
        self._parser.parse_args(argv)
        local = getattr(session.transport, "local_address", None)
        local_text = f"{local[0]}:{local[1]}" if local else "-"
        peer_text = str(session.peer) if session.peer else "none"
        tasks = session.scheduler.keys()
        subscribed = session.subscriptions.addresses()
        data = {
            "peer": peer_text if session.peer else None,
            "local": local_text,
            "tasks": tasks,
            "last": session.last_key,
            "subscriptions": subscribed,
            "buffers": session.print_buffers,
        }
        emit_result(session, message=f"Peer: {peer_text} local={local_text}", data=data)
        if session.config.json_output:
            return
        if tasks:
            marked = [f"{key}*" if key == session.last_key else key for key in tasks]
            print(f"  timers: {', '.join(marked)}")
        else:
            print("  timers: (none)")
        if subscribed:
            print(f"  subscriptions: {', '.join(subscribed)}")
