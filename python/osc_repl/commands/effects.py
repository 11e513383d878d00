"""Continuous value effects: fade, sine and triangle."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from ..effects import fade_value, sine, triangle
from ..output import emit_result
from .base import Command, CommandArgumentParser

if TYPE_CHECKING:  # pragma: no cover
    from ..context import ConsoleSession

FADE_KEYWORDS = ("in", "out", "to")


class FadeCommand(Command):
    def __init__(self) -> None:
        super().__init__("fade", "Ramp <address> linearly over <duration> seconds")
        parser = CommandArgumentParser("fade")
        parser.add_argument("duration", type=float, help="Seconds")
        parser.add_argument("address", help="OSC address")
        parser.add_argument("start", metavar="from|in|out|to", help="Start value or keyword")
        parser.add_argument("end", nargs="?", type=float, metavar="to", help="End value")
        self._parser = parser

    async def run(self, session: "ConsoleSession", argv: List[str]) -> None:
        args = self._parser.parse_args(argv)
        if args.duration < 0:
            self._parser.error("duration must not be negative")
        start, end = await self._resolve_range(session, args.address, args.start, args.end)
        duration = args.duration
        await session.start_effect(
            args.address,
            lambda elapsed: fade_value(elapsed, duration, start, end),
            duration=duration,
        )
        emit_result(
            session,
            message=f"Fading {args.address} from {start:g} to {end:g} over {duration:g}s.",
            data={"key": args.address, "from": start, "to": end, "duration": duration},
        )

    async def _resolve_range(self, session: "ConsoleSession", address: str, start: str, end):
        keyword = start.lower()
        if keyword == "in":
            return 0.0, session.config.fade_in_level if end is None else end
        if keyword == "out":
            current = await session.query(address, "f")
            return float(current.value), 0.0 if end is None else end
        if keyword == "to":
            if end is None:
                self._parser.error("'to' needs a target value")
            current = await session.query(address, "f")
            return float(current.value), end
        try:
            value = float(start)
        except ValueError:
            self._parser.error(f"expected a number or one of {', '.join(FADE_KEYWORDS)}, got {start!r}")
        if end is None:
            self._parser.error("missing end value")
        return value, end


class _WaveCommand(Command):
    factory = staticmethod(sine)
    label = ""

    def __init__(self, name: str, description: str) -> None:
        super().__init__(name, description)
        parser = CommandArgumentParser(name)
        parser.add_argument("period", type=float, help="Seconds per cycle")
        parser.add_argument("address", help="OSC address")
        parser.add_argument("min", type=float, help="Lowest value")
        parser.add_argument("max", type=float, help="Highest value")
        self._parser = parser

    async def run(self, session: "ConsoleSession", argv: List[str]) -> None:
        args = self._parser.parse_args(argv)
        if args.period <= 0:
            self._parser.error("period must be positive")
        await session.start_effect(args.address, self.factory(args.period, args.min, args.max))
        emit_result(
            session,
            message=f"Running {self.label} on {args.address} ({args.min:g}..{args.max:g}, {args.period:g}s).",
            data={"key": args.address, "period": args.period, "min": args.min, "max": args.max},
        )


class SineCommand(_WaveCommand):
    factory = staticmethod(sine)
    label = "sine"

    def __init__(self) -> None:
        super().__init__("sin", "Oscillate <address> between <min> and <max> (sine)")


class TriangleCommand(_WaveCommand):
    factory = staticmethod(triangle)
    label = "triangle"

    def __init__(self) -> None:
        super().__init__("tri", "Oscillate <address> between <min> and <max> (triangle)")
