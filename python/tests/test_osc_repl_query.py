"""Tests for probe-based request/response queries."""

from __future__ import annotations

import asyncio

import pytest

from osc_repl.errors import QueryTimeout, TransportError
from osc_repl.values import TypedValue

FADER = "/ch/01/mix/fader"


def test_query_resolves_after_third_probe(session, transport):
    def answer_on_third_probe(address, args):
        if address == FADER and args is None and len(transport.sends_to(FADER)) == 3:
            asyncio.get_running_loop().call_soon(transport.deliver, FADER, TypedValue("f", 0.25))

    transport.responder = answer_on_third_probe

    async def scenario():
        await session.open()
        value = await session.query(FADER, "f")
        await asyncio.sleep(0.12)
        return value

    value = asyncio.run(scenario())
    assert value == TypedValue("f", 0.25)
    assert transport.sends_to(FADER) == [None, None, None]
    assert FADER not in session.subscriptions
    assert session.queries.pending == 0


def test_query_times_out_and_leaves_nothing_behind(session, transport):
    async def scenario():
        await session.open()
        loop = asyncio.get_running_loop()
        started = loop.time()
        with pytest.raises(QueryTimeout) as excinfo:
            await session.queries.query(FADER, "f", timeout=0.2)
        elapsed = loop.time() - started
        probes = len(transport.sends_to(FADER))
        await asyncio.sleep(0.15)
        return excinfo.value, elapsed, probes

    error, elapsed, probes = asyncio.run(scenario())
    assert error.address == FADER
    assert 0.19 <= elapsed < 0.5
    assert probes >= 3
    assert len(transport.sends_to(FADER)) == probes
    assert len(session.subscriptions) == 0
    assert session.queries.pending == 0


def test_reply_with_other_tag_is_ignored(session, transport):
    def answer(address, args):
        loop = asyncio.get_running_loop()
        loop.call_soon(transport.deliver, FADER, TypedValue("s", "-oo"))
        loop.call_soon(transport.deliver, FADER, TypedValue("f", 0.75))

    transport.responder = answer

    async def scenario():
        await session.open()
        return await session.query(FADER, "f")

    assert asyncio.run(scenario()) == TypedValue("f", 0.75)


def test_concurrent_queries_on_one_address_are_not_merged(session, transport):
    async def scenario():
        await session.open()
        first = asyncio.ensure_future(session.query(FADER, "f"))
        second = asyncio.ensure_future(session.query(FADER, "f"))
        await asyncio.sleep(0.01)
        handlers = len(session.subscriptions.handlers(FADER))
        pending = session.queries.pending
        transport.deliver(FADER, TypedValue("f", 0.5))
        results = await asyncio.gather(first, second)
        return handlers, pending, results

    handlers, pending, results = asyncio.run(scenario())
    assert handlers == 2
    assert pending == 2
    assert results == [TypedValue("f", 0.5), TypedValue("f", 0.5)]
    assert len(session.subscriptions) == 0


def test_send_failure_ends_the_query(session, transport):
    def refuse(address, args):
        raise TransportError("Not connected to any peer")

    transport.responder = refuse

    async def scenario():
        await session.open()
        with pytest.raises(TransportError):
            await session.query(FADER, "f")

    asyncio.run(scenario())
    assert session.queries.pending == 0
    assert len(session.subscriptions) == 0
