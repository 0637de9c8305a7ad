"""Tests for habitflow/scheduling.py — manual and asyncio tick sources."""

import asyncio

from habitflow.scheduling import AsyncioScheduler, ManualScheduler


def test_manual_advance_fires_each_active_callback():
    sched = ManualScheduler()
    calls = []
    sched.every(1.0, lambda: calls.append("a"))
    sched.every(1.0, lambda: calls.append("b"))
    sched.advance(2)
    assert calls == ["a", "b", "a", "b"]


def test_manual_cancel_is_idempotent():
    sched = ManualScheduler()
    calls = []
    handle = sched.every(1.0, lambda: calls.append(1))
    handle.cancel()
    handle.cancel()
    sched.advance(3)
    assert calls == []
    assert handle.active is False
    assert sched.active_count == 0


def test_manual_cancel_inside_callback_stops_further_rounds():
    sched = ManualScheduler()
    calls = []

    def once():
        calls.append(1)
        handle.cancel()

    handle = sched.every(1.0, once)
    sched.advance(5)
    assert calls == [1]


def test_asyncio_scheduler_ticks_and_cancels():
    async def scenario():
        calls = []
        handle = AsyncioScheduler().every(0.01, lambda: calls.append(1))
        await asyncio.sleep(0.1)
        handle.cancel()
        seen = len(calls)
        await asyncio.sleep(0.05)
        return seen, len(calls), handle.active

    seen, after, active = asyncio.run(scenario())
    assert seen >= 2
    assert after == seen
    assert active is False


def test_asyncio_cancel_inside_callback():
    async def scenario():
        calls = []

        def once():
            calls.append(1)
            handle.cancel()

        handle = AsyncioScheduler().every(0.01, once)
        await asyncio.sleep(0.08)
        return calls

    assert asyncio.run(scenario()) == [1]


def test_asyncio_failing_callback_keeps_ticking():
    async def scenario():
        calls = []

        def flaky():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("boom")

        handle = AsyncioScheduler().every(0.01, flaky)
        await asyncio.sleep(0.1)
        handle.cancel()
        return len(calls)

    assert asyncio.run(scenario()) >= 2
