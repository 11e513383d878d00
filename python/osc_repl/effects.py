"""Value generators for the continuous effects (fade, sine, triangle)."""

from __future__ import annotations

import math
from typing import Callable

Waveform = Callable[[float], float]


def fade_value(elapsed: float, duration: float, start: float, end: float) -> float:
    if duration <= 0 or elapsed >= duration:
        return end
    return start + (end - start) * elapsed / duration


def sine_value(elapsed: float, period: float, low: float, high: float) -> float:
    return low + (high - low) * (0.5 + 0.5 * math.sin(2 * math.pi * elapsed / period))


def triangle_value(elapsed: float, period: float, low: float, high: float) -> float:
    phase = elapsed / period
    return low + 2 * (high - low) * abs(phase - math.floor(0.5 + phase))


def sine(period: float, low: float, high: float) -> Waveform:
    return lambda elapsed: sine_value(elapsed, period, low, high)


def triangle(period: float, low: float, high: float) -> Waveform:
    return lambda elapsed: triangle_value(elapsed, period, low, high)


__all__ = ["fade_value", "sine_value", "triangle_value", "sine", "triangle", "Waveform"]
