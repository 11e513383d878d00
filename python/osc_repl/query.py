"""Request/response on top of fire-and-forget OSC.

A query subscribes to the address, probes it with argument-less sends at a
fixed cadence and resolves with the first inbound value whose type tag
matches.  A deadline bounds the whole exchange.  Whatever the outcome, the
probe task and the subscription are gone when :meth:`QueryCorrelator.query`
returns.

Concurrent queries for the same address are not merged: each holds its own
subscription and its own probe task, and a single reply resolves all of them.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Sequence, Set

from .codec import OSCMessage
from .errors import ConsoleError, QueryTimeout
from .scheduler import PeriodicTask
from .subscriptions import SubscriptionRegistry
from .values import TypedValue

LOGGER = logging.getLogger("osc_repl.query")

SendFn = Callable[[str, Optional[Sequence[TypedValue]]], Awaitable[None]]

DEFAULT_TIMEOUT = 5.0
DEFAULT_RESEND_INTERVAL = 0.05


class QueryCorrelator:
    def __init__(
        self,
        send: SendFn,
        subscriptions: SubscriptionRegistry,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        resend_interval: float = DEFAULT_RESEND_INTERVAL,
    ) -> None:
        self._send = send
        self._subscriptions = subscriptions
        self.timeout = timeout
        self.resend_interval = resend_interval
        self._probes: Set[PeriodicTask] = set()

    @property
    def pending(self) -> int:
        return len(self._probes)

    async def query(
        self,
        address: str,
        expected_tag: str,
        timeout: Optional[float] = None,
        resend_interval: Optional[float] = None,
    ) -> TypedValue:
        timeout = self.timeout if timeout is None else timeout
        resend_interval = self.resend_interval if resend_interval is None else resend_interval
        loop = asyncio.get_running_loop()
        result: asyncio.Future = loop.create_future()

        def on_message(message: OSCMessage) -> None:
            if result.done() or not message.args:
                return
            first = message.args[0]
            if first.tag != expected_tag:
                LOGGER.debug("query %s: ignoring '%s' reply, want '%s'", address, first.tag, expected_tag)
                return
            result.set_result(first)

        async def probe(elapsed: float) -> Optional[bool]:
            try:
                await self._send(address, None)
            except ConsoleError as exc:
                if not result.done():
                    result.set_exception(exc)
                return False
            return None

        self._subscriptions.subscribe(address, on_message)
        prober = PeriodicTask(f"query:{address}", resend_interval, probe)
        self._probes.add(prober)
        prober.start()
        try:
            return await asyncio.wait_for(result, timeout)
        except asyncio.TimeoutError:
            raise QueryTimeout(address, timeout) from None
        finally:
            prober.cancel()
            self._probes.discard(prober)
            self._subscriptions.unsubscribe(address, on_message)

    def cancel_all(self) -> None:
        probes = list(self._probes)
        self._probes.clear()
        for prober in probes:
            prober.cancel()


__all__ = ["QueryCorrelator", "DEFAULT_TIMEOUT", "DEFAULT_RESEND_INTERVAL"]
