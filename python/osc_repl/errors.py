"""Exception taxonomy for osc-repl."""

from __future__ import annotations


class ConsoleError(Exception):
    """Base class for errors rendered at the line boundary."""


class UsageError(ConsoleError):
    """Raised when a command receives bad arguments."""


class UnknownCommand(ConsoleError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown command: @{name}")
        self.name = name


class UnknownTypeTag(ConsoleError):
    def __init__(self, tag: str) -> None:
        super().__init__(f"Unknown type: '{tag}'")
        self.tag = tag


class MissingArgument(ConsoleError):
    def __init__(self, message: str = "Missing value") -> None:
        super().__init__(message)


class QueryTimeout(ConsoleError):
    def __init__(self, address: str, timeout: float) -> None:
        super().__init__(f"No response from {address} within {timeout:g}s")
        self.address = address
        self.timeout = timeout


class TransportError(ConsoleError):
    """Raised when the transport cannot complete an operation."""


class EncodeError(ConsoleError):
    """Raised when a message cannot be encoded for the wire."""


class DecodeError(ConsoleError):
    """Raised when an inbound datagram is not a valid OSC packet."""


class SessionClosed(ConsoleError):
    def __init__(self) -> None:
        super().__init__("Session is terminated")


__all__ = [
    "ConsoleError",
    "UsageError",
    "UnknownCommand",
    "UnknownTypeTag",
    "MissingArgument",
    "QueryTimeout",
    "TransportError",
    "EncodeError",
    "DecodeError",
    "SessionClosed",
]
