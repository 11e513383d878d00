"""Address-keyed routing of inbound messages to interested handlers."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from .codec import OSCMessage

LOGGER = logging.getLogger("osc_repl.subscriptions")

MessageCallback = Callable[[OSCMessage], None]


class SubscriptionRegistry:
    """Fan-out inbound messages to handlers subscribed to their exact address."""

    def __init__(self) -> None:
        self._handlers: Dict[str, List[MessageCallback]] = {}

    def subscribe(self, address: str, handler: MessageCallback) -> MessageCallback:
        self._handlers.setdefault(address, []).append(handler)
        return handler

    def unsubscribe(self, address: Optional[str] = None, handler: Optional[MessageCallback] = None) -> None:
        """Remove subscriptions.

        * no arguments: clear everything
        * *address* only: drop every handler for that address
        * *address* and *handler*: drop that one handler
        * *handler* only: drop that handler wherever it is registered

        Addresses left without handlers are pruned.
        """
        if address is None and handler is None:
            self._handlers.clear()
            return
        if handler is None:
            self._handlers.pop(address, None)
            return
        addresses = [address] if address is not None else list(self._handlers)
        for key in addresses:
            handlers = self._handlers.get(key)
            if not handlers:
                continue
            try:
                handlers.remove(handler)
            except ValueError:
                continue
            if not handlers:
                del self._handlers[key]

    def dispatch(self, message: OSCMessage) -> bool:
        """Invoke every handler for ``message.address``.

        Returns ``False`` when nobody is subscribed, so the caller can fall
        back to default rendering.
        """
        handlers = self._handlers.get(message.address)
        if not handlers:
            return False
        for handler in list(handlers):
            try:
                handler(message)
            except Exception:
                LOGGER.exception("subscription handler for %s failed", message.address)
        return True

    def handlers(self, address: str) -> List[MessageCallback]:
        return list(self._handlers.get(address, ()))

    def addresses(self) -> List[str]:
        return sorted(self._handlers)

    def __contains__(self, address: object) -> bool:
        return address in self._handlers

    def __len__(self) -> int:
        return sum(len(handlers) for handlers in self._handlers.values())


__all__ = ["SubscriptionRegistry", "MessageCallback"]
