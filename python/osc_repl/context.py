"""Console session: the single owner of peer, registries and live tasks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Set

from .codec import OSCMessage
from .config import ConsoleConfig
from .effects import Waveform
from .errors import SessionClosed
from .output import emit_message
from .query import QueryCorrelator
from .scheduler import CancelFn, PeriodicScheduler, TickCallback
from .subscriptions import SubscriptionRegistry
from .transport import OSCTransport, Peer
from .values import TypedValue, TypeRegistry, default_registry

if TYPE_CHECKING:  # pragma: no cover
    from .commands import CommandRegistry

LOGGER = logging.getLogger("osc_repl.context")


def _noop() -> None:
    pass


class SessionState(str, Enum):
    RUNNING = "running"
    TERMINATING = "terminating"
    TERMINATED = "terminated"


@dataclass
class ConsoleSession:
    """Holds shared console state.

    Inbound messages, periodic ticks and the command being executed all run
    on the same event loop, so the maps below are only ever touched from the
    loop thread.
    """

    transport: OSCTransport = field(default_factory=OSCTransport)
    config: ConsoleConfig = field(default_factory=ConsoleConfig)
    types: TypeRegistry = field(default_factory=default_registry)
    commands: Optional["CommandRegistry"] = None
    peer: Optional[Peer] = None
    print_buffers: bool = False
    last_key: Optional[str] = None
    known_addresses: Set[str] = field(default_factory=set)
    subscriptions: SubscriptionRegistry = field(default_factory=SubscriptionRegistry)
    scheduler: PeriodicScheduler = field(default_factory=PeriodicScheduler)
    state: SessionState = field(default=SessionState.RUNNING, init=False)
    queries: QueryCorrelator = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.commands is None:
            from .commands import build_registry

            self.commands = build_registry()
        self.queries = QueryCorrelator(
            self.send,
            self.subscriptions,
            timeout=self.config.query_timeout,
            resend_interval=self.config.query_resend_interval,
        )

    @property
    def running(self) -> bool:
        return self.state is SessionState.RUNNING

    @property
    def connected(self) -> bool:
        return self.peer is not None

    def _ensure_running(self) -> None:
        if self.state is not SessionState.RUNNING:
            raise SessionClosed()

    async def open(self) -> None:
        self._ensure_running()
        self.transport.set_message_handler(self.handle_message)
        await self.transport.open()

    #
    # Peer management
    #
    def connect(self, ip: str, port: int) -> Peer:
        self._ensure_running()
        self.peer = Peer(ip, port)
        LOGGER.info("peer set to %s", self.peer)
        return self.peer

    def disconnect(self) -> Optional[Peer]:
        peer, self.peer = self.peer, None
        if peer:
            LOGGER.info("peer %s cleared", peer)
        return peer

    #
    # Message path
    #
    def parse_args(self, types: Optional[str], values: Iterable[str]) -> Optional[List[TypedValue]]:
        return self.types.parse_args(types, list(values), self)

    def format_args(self, args: Iterable[TypedValue]) -> List[str]:
        return self.types.format_args(args, self)

    async def send(self, address: str, args: Optional[Sequence[TypedValue]] = None) -> None:
        self._ensure_running()
        self.known_addresses.add(address)
        await self.transport.send(address, args, self.peer)

    def handle_message(self, message: OSCMessage) -> None:
        if self.state is not SessionState.RUNNING:
            return
        self.known_addresses.add(message.address)
        if not self.subscriptions.dispatch(message):
            emit_message(self, message)

    async def query(self, address: str, expected_tag: str, timeout: Optional[float] = None) -> TypedValue:
        self._ensure_running()
        return await self.queries.query(address, expected_tag, timeout)

    #
    # Scheduled tasks
    #
    def schedule(self, key: str, interval: float, callback: TickCallback, *, immediate: bool = True) -> CancelFn:
        self._ensure_running()
        cancel = self.scheduler.schedule(key, interval, callback, immediate=immediate)
        self.last_key = key
        return cancel

    async def start_effect(
        self, address: str, waveform: Waveform, *, duration: Optional[float] = None
    ) -> CancelFn:
        """Send ``waveform(elapsed)`` as a float to *address* every effect tick.

        The first value is sent before the task is armed, so a failing send
        raises here.  With a *duration* the effect sends ``waveform(duration)``
        once the duration has elapsed and then ends on its own.
        """
        await self.send(address, [TypedValue("f", float(waveform(0.0)))])
        if duration is not None and duration <= 0:
            self.scheduler.cancel(address)
            return _noop

        async def tick(elapsed: float) -> Optional[bool]:
            if duration is not None and elapsed >= duration:
                await self.send(address, [TypedValue("f", float(waveform(duration)))])
                return False
            await self.send(address, [TypedValue("f", float(waveform(elapsed)))])
            return None

        return self.schedule(address, self.config.effect_interval, tick, immediate=False)

    def stop(self, key: Optional[str] = None) -> Optional[str]:
        """Cancel the task under *key*, or the last scheduled one; return the key stopped."""
        key = key or self.last_key
        if key is None:
            return None
        if key == self.last_key:
            self.last_key = None
        return key if self.scheduler.cancel(key) else None

    #
    # Lifecycle
    #
    async def terminate(self) -> None:
        if self.state is not SessionState.RUNNING:
            return
        self.state = SessionState.TERMINATING
        LOGGER.debug("terminating: %d task(s), %d subscription(s)", len(self.scheduler), len(self.subscriptions))
        self.scheduler.cancel_all()
        self.queries.cancel_all()
        self.subscriptions.unsubscribe()
        self.transport.set_message_handler(None)
        try:
            await self.transport.close()
        finally:
            self.state = SessionState.TERMINATED


__all__ = ["ConsoleSession", "SessionState"]
