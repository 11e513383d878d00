"""OSC wire codec built on python-osc.

Outbound messages go through ``OscMessageBuilder``.  Inbound datagrams are
walked tag by tag with the ``osc_types`` getters rather than through
``OscMessage.params`` so that every argument keeps its type tag, including
tags this console has no formatter for.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, List, Optional, Sequence, Tuple

from pythonosc import osc_bundle, osc_message
from pythonosc.osc_message_builder import BuildError, OscMessageBuilder
from pythonosc.parsing import osc_types

from .errors import DecodeError, EncodeError
from .values import TypedValue

if TYPE_CHECKING:  # pragma: no cover
    from .transport import Peer

LOGGER = logging.getLogger("osc_repl.codec")

BOOL_TAG = "B"

_GETTERS = {
    "i": osc_types.get_int,
    "h": osc_types.get_int64,
    "f": osc_types.get_float,
    "d": osc_types.get_double,
    "s": osc_types.get_string,
    "b": osc_types.get_blob,
    "r": osc_types.get_rgba,
    "m": osc_types.get_midi,
    "t": osc_types.get_timetag,
}
_CONSTANTS = {"T": (BOOL_TAG, True), "F": (BOOL_TAG, False), "N": ("N", None)}


@dataclass
class OSCMessage:
    """A decoded inbound message."""

    address: str
    args: List[TypedValue] = field(default_factory=list)
    origin: Optional["Peer"] = None


def encode_message(address: str, args: Optional[Sequence[TypedValue]] = None) -> bytes:
    """Encode *address* and typed *args* into an OSC message datagram."""
    builder = OscMessageBuilder(address=address)
    try:
        for arg in args or ():
            if arg.tag == BOOL_TAG:
                wire_tag = OscMessageBuilder.ARG_TYPE_TRUE if arg.value else OscMessageBuilder.ARG_TYPE_FALSE
                builder.add_arg(bool(arg.value), wire_tag)
            else:
                builder.add_arg(arg.value, arg.tag)
        return builder.build().dgram
    except (BuildError, ValueError, OverflowError) as exc:
        raise EncodeError(f"cannot encode {address}: {exc}") from exc


def decode_packet(dgram: bytes) -> List[OSCMessage]:
    """Decode a message or bundle datagram into a flat list of messages."""
    if osc_bundle.OscBundle.dgram_is_bundle(dgram):
        try:
            bundle = osc_bundle.OscBundle(dgram)
        except osc_bundle.ParseError as exc:
            raise DecodeError(f"bad bundle: {exc}") from exc
        messages: List[OSCMessage] = []
        for content in bundle:
            messages.extend(decode_packet(content.dgram))
        return messages
    if osc_message.OscMessage.dgram_is_message(dgram):
        return [decode_message(dgram)]
    raise DecodeError(f"not an OSC packet ({len(dgram)} bytes)")


def decode_message(dgram: bytes) -> OSCMessage:
    try:
        address, index = osc_types.get_string(dgram, 0)
        if not dgram[index:]:
            return OSCMessage(address)
        type_tag, index = osc_types.get_string(dgram, index)
        if not type_tag.startswith(","):
            raise DecodeError(f"type tag string must start with ',', got {type_tag!r}")
        args, _ = _decode_args(dgram, index, type_tag[1:])
    except osc_types.ParseError as exc:
        raise DecodeError(f"bad message: {exc}") from exc
    return OSCMessage(address, args)


def _decode_args(dgram: bytes, index: int, tags: str) -> Tuple[List[TypedValue], int]:
    args: List[TypedValue] = []
    stack: List[List[Any]] = []
    for tag in tags:
        if tag == "[":
            stack.append([])
            continue
        if tag == "]":
            if not stack:
                raise DecodeError(f"unexpected ']' in type tags {tags!r}")
            items = stack.pop()
            value = TypedValue("[", items)
        elif tag in _CONSTANTS:
            value = TypedValue(*_CONSTANTS[tag])
        elif tag in _GETTERS:
            raw, index = _GETTERS[tag](dgram, index)
            value = TypedValue(tag, raw)
        else:
            # Payload size unknown; treat as zero-width like python-osc does.
            LOGGER.warning("unhandled OSC type tag %r", tag)
            value = TypedValue(tag, None)
        if stack:
            stack[-1].append(value)
        else:
            args.append(value)
    if stack:
        raise DecodeError(f"missing ']' in type tags {tags!r}")
    return args, index


__all__ = ["OSCMessage", "encode_message", "decode_packet", "decode_message", "BOOL_TAG"]
