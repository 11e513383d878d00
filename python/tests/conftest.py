"""
Pytest configuration and fixtures for osc-repl tests.
"""
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple

import pytest

PYTHON_SRC = Path(__file__).resolve().parents[1]
if str(PYTHON_SRC) not in sys.path:
    sys.path.insert(0, str(PYTHON_SRC))

from osc_repl.codec import OSCMessage  # noqa: E402
from osc_repl.config import ConsoleConfig  # noqa: E402
from osc_repl.context import ConsoleSession  # noqa: E402
from osc_repl.errors import TransportError  # noqa: E402
from osc_repl.transport import Peer  # noqa: E402
from osc_repl.values import TypedValue  # noqa: E402


@dataclass
class FakeTransport:
    """In-memory stand-in for OSCTransport that records every send."""

    sent: List[Tuple[str, Optional[List[TypedValue]], Optional[Peer]]] = field(default_factory=list)
    responder: Optional[Callable[[str, Optional[List[TypedValue]]], Any]] = None
    opened: bool = False
    closed: bool = False
    close_calls: int = 0
    require_peer: bool = False
    local_address: Optional[Tuple[str, int]] = ("127.0.0.1", 57120)
    _handler: Optional[Callable[[OSCMessage], None]] = None

    def set_message_handler(self, handler) -> None:
        self._handler = handler

    async def open(self) -> None:
        self.opened = True

    async def close(self) -> None:
        self.close_calls += 1
        self.closed = True

    async def send(self, address: str, args: Optional[Sequence[TypedValue]] = None, peer: Optional[Peer] = None) -> None:
        if self.closed:
            raise TransportError("transport closed")
        if self.require_peer and peer is None:
            raise TransportError("Not connected to any peer")
        self.sent.append((address, list(args) if args is not None else None, peer))
        if self.responder is not None:
            self.responder(address, args)

    def deliver(self, address: str, *args: TypedValue) -> None:
        if self._handler is not None:
            self._handler(OSCMessage(address, list(args), Peer("127.0.0.1", 10023)))

    def sends_to(self, address: str) -> List[Optional[List[TypedValue]]]:
        return [args for addr, args, _ in self.sent if addr == address]


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def session(transport: FakeTransport) -> ConsoleSession:
    config = ConsoleConfig(query_timeout=1.0, query_resend_interval=0.05, effect_interval=0.02)
    return ConsoleSession(transport=transport, config=config)
