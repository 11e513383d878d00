"""Tests for effect waveforms and effect scheduling."""

from __future__ import annotations

import asyncio

import pytest

from osc_repl.effects import fade_value, sine_value, triangle_value
from osc_repl.values import TypedValue


def test_fade_is_linear_and_clamps_at_duration():
    assert fade_value(0.0, 2.0, 0.0, 1.0) == 0.0
    assert fade_value(0.5, 2.0, 0.0, 1.0) == pytest.approx(0.25)
    assert fade_value(3.0, 2.0, 0.2, 0.8) == 0.8
    assert fade_value(0.0, 0.0, 0.2, 0.8) == 0.8


def test_sine_spans_min_to_max():
    assert sine_value(0.0, 4.0, 0.0, 1.0) == pytest.approx(0.5)
    assert sine_value(1.0, 4.0, 0.0, 1.0) == pytest.approx(1.0)
    assert sine_value(3.0, 4.0, 0.0, 1.0) == pytest.approx(0.0)


def test_triangle_rises_then_falls():
    assert triangle_value(0.0, 2.0, 0.0, 1.0) == pytest.approx(0.0)
    assert triangle_value(0.5, 2.0, 0.0, 1.0) == pytest.approx(0.5)
    assert triangle_value(1.0, 2.0, 0.0, 1.0) == pytest.approx(1.0)
    assert triangle_value(1.5, 2.0, 0.0, 1.0) == pytest.approx(0.5)
    assert triangle_value(2.0, 2.0, 0.2, 0.6) == pytest.approx(0.2)


def test_timed_effect_sends_end_value_and_stops(session, transport):
    async def scenario():
        await session.open()
        await session.start_effect("/x", lambda elapsed: elapsed * 10, duration=0.05)
        task = session.scheduler.get("/x")
        await task.wait()

    asyncio.run(scenario())
    sent = transport.sends_to("/x")
    assert sent[0][0].tag == "f"
    assert sent[-1] == [TypedValue("f", 0.5)]
    assert all(0.0 <= args[0].value <= 0.5 for args in sent)
    assert "/x" not in session.scheduler


def test_sin_then_tri_on_one_address_leaves_one_task(session, transport):
    async def scenario():
        await session.open()
        await session.start_effect("/x", lambda elapsed: 1.0)
        first = session.scheduler.get("/x")
        await asyncio.sleep(0.05)
        await session.start_effect("/x", lambda elapsed: 2.0)
        await asyncio.sleep(0.01)
        marker = len(transport.sent)
        await asyncio.sleep(0.06)
        tail = transport.sends_to("/x")[marker:]
        live = len(session.scheduler)
        first_active = first.active
        await session.terminate()
        return tail, live, first_active

    tail, live, first_active = asyncio.run(scenario())
    assert live == 1
    assert not first_active
    assert tail and all(args == [TypedValue("f", 2.0)] for args in tail)
