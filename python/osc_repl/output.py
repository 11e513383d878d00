"""Output helpers for osc-repl."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

if TYPE_CHECKING:  # pragma: no cover
    from .codec import OSCMessage
    from .context import ConsoleSession


def _json_dump(payload: Mapping[str, Any]) -> str:
    return json.dumps(payload, sort_keys=True)


def emit_result(session: "ConsoleSession", *, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
    """Emit a successful command result."""
    if session.config.json_output:
        payload: Dict[str, Any] = {"status": "ok"}
        if data is not None:
            payload["result"] = data
        else:
            payload["message"] = message
        print(_json_dump(payload))
    else:
        print(message)


def emit_error(session: "ConsoleSession", *, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
    """Emit an error message respecting JSON mode."""
    payload: Dict[str, Any] = {"status": "error", "error": message}
    if data:
        payload["details"] = dict(data)
    if session.config.json_output:
        print(_json_dump(payload))
    else:
        print(message)


def format_message(session: "ConsoleSession", message: "OSCMessage") -> str:
    return " ".join([">", message.address, *session.format_args(message.args)])


def emit_message(session: "ConsoleSession", message: "OSCMessage") -> None:
    """Render an inbound message nobody subscribed to."""
    if session.config.json_output:
        payload = {
            "address": message.address,
            "args": session.format_args(message.args),
            "from": str(message.origin) if message.origin else None,
        }
        print(_json_dump({"status": "message", "message": payload}))
    else:
        print(format_message(session, message))


__all__ = ["emit_result", "emit_error", "emit_message", "format_message"]
