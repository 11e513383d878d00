"""
Transport layer for osc-repl.

Responsibilities:
    * Bind a UDP socket on the asyncio loop and keep it open for the session.
    * Encode outbound messages and hand them to the OS for the current peer.
    * Decode inbound datagrams and surface them to a single message handler.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence, Tuple

from .codec import OSCMessage, decode_packet, encode_message
from .errors import DecodeError, TransportError
from .values import TypedValue

LOGGER = logging.getLogger("osc_repl.transport")

MessageHandler = Callable[[OSCMessage], None]


@dataclass(frozen=True)
class Peer:
    ip: str
    port: int

    def __str__(self) -> str:
        return f"{self.ip}:{self.port}"


@dataclass
class TransportConfig:
    local_address: str = "0.0.0.0"
    local_port: int = 0
    remote_address: Optional[str] = None
    remote_port: Optional[int] = None
    broadcast: bool = False
    broadcast_address: str = "255.255.255.255"

    def default_peer(self) -> Optional[Peer]:
        if self.remote_address and self.remote_port:
            return Peer(self.remote_address, self.remote_port)
        return None


class _DatagramProtocol(asyncio.DatagramProtocol):
    def __init__(self, owner: "OSCTransport") -> None:
        self._owner = owner

    def datagram_received(self, data: bytes, addr: Tuple[str, int]) -> None:
        self._owner._handle_datagram(data, addr)

    def error_received(self, exc: Exception) -> None:
        LOGGER.warning("socket error: %s", exc)

    def connection_lost(self, exc: Optional[Exception]) -> None:
        self._owner._handle_connection_lost(exc)


@dataclass
class OSCTransport:
    """Asyncio UDP endpoint speaking OSC."""

    config: TransportConfig = field(default_factory=TransportConfig)

    _transport: Optional[asyncio.DatagramTransport] = field(init=False, default=None)
    _closed: Optional[asyncio.Future] = field(init=False, default=None)
    _state: str = field(init=False, default="closed")
    _message_handler: Optional[MessageHandler] = field(init=False, default=None)

    @property
    def state(self) -> str:
        return self._state

    @property
    def local_address(self) -> Optional[Tuple[str, int]]:
        if self._transport is None:
            return None
        sockname = self._transport.get_extra_info("sockname")
        return (sockname[0], sockname[1]) if sockname else None

    def set_message_handler(self, handler: Optional[MessageHandler]) -> None:
        self._message_handler = handler

    async def open(self) -> None:
        """Bind the local socket."""
        if self._transport is not None:
            return
        loop = asyncio.get_running_loop()
        try:
            transport, _ = await loop.create_datagram_endpoint(
                lambda: _DatagramProtocol(self),
                local_addr=(self.config.local_address, self.config.local_port),
                allow_broadcast=self.config.broadcast,
            )
        except OSError as exc:
            raise TransportError(
                f"bind {self.config.local_address}:{self.config.local_port} failed: {exc}"
            ) from exc
        self._transport = transport
        self._closed = loop.create_future()
        self._state = "open"
        LOGGER.debug("listening on %s", self.local_address)

    async def close(self) -> None:
        """Close the socket and wait until the loop has released it."""
        transport = self._transport
        if transport is None:
            return
        self._transport = None
        transport.close()
        if self._closed is not None:
            await self._closed
        self._state = "closed"

    async def send(
        self,
        address: str,
        args: Optional[Sequence[TypedValue]] = None,
        peer: Optional[Peer] = None,
    ) -> None:
        transport = self._transport
        if transport is None:
            raise TransportError("transport closed")
        target = self._resolve_target(peer)
        dgram = encode_message(address, args)
        LOGGER.debug("-> %s %s (%d bytes)", target, address, len(dgram))
        try:
            transport.sendto(dgram, (target.ip, target.port))
        except OSError as exc:
            raise TransportError(f"send to {target} failed: {exc}") from exc

    def _resolve_target(self, peer: Optional[Peer]) -> Peer:
        if peer is not None:
            return peer
        if self.config.broadcast and self.config.remote_port:
            return Peer(self.config.broadcast_address, self.config.remote_port)
        raise TransportError("Not connected to any peer")

    def _handle_datagram(self, data: bytes, addr: Tuple[str, int]) -> None:
        origin = Peer(addr[0], addr[1])
        try:
            messages = decode_packet(data)
        except DecodeError as exc:
            LOGGER.warning("dropping datagram from %s: %s", origin, exc)
            return
        handler = self._message_handler
        for message in messages:
            message.origin = origin
            LOGGER.debug("<- %s %s", origin, message.address)
            if handler is not None:
                handler(message)

    def _handle_connection_lost(self, exc: Optional[Exception]) -> None:
        if exc is not None:
            LOGGER.warning("transport lost: %s", exc)
        if self._closed is not None and not self._closed.done():
            self._closed.set_result(None)
        self._transport = None
        self._state = "closed"


__all__ = ["OSCTransport", "TransportConfig", "Peer", "MessageHandler"]
