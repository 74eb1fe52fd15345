"""Countdown Ticker — tests for the recurring recompute task.

Tests cover:
    - Tick skipped entirely when there are no timers
    - Views derived from state without backend calls
    - stop() halts rescheduling; start() is idempotent
    - A failing on_tick does not end the loop
"""

import asyncio

import pytest

from countdown_todo.services.countdown_ticker import CountdownTicker


@pytest.mark.asyncio
async def test_tick_is_noop_without_timers(store, backend):
    seen = []
    ticker = CountdownTicker(store, seen.append)
    assert await ticker.tick() is False
    assert seen == []
    assert backend.calls == []


@pytest.mark.asyncio
async def test_tick_derives_views_without_backend_calls(store, backend, clock):
    await store.create_timer("launch", clock.minute + 120)
    backend.calls.clear()
    seen = []

    assert await CountdownTicker(store, seen.append).tick() is True

    (views,) = seen
    assert views[0].countdown_text == "剩余 2:00"
    assert backend.calls == []


@pytest.mark.asyncio
async def test_async_callback_is_awaited(store, clock):
    await store.create_timer("launch", clock.minute + 5)
    seen = []

    async def on_tick(views):
        seen.append(len(views))

    await CountdownTicker(store, on_tick).tick()
    assert seen == [1]


@pytest.mark.asyncio
async def test_stop_halts_rescheduling(store, clock):
    await store.create_timer("launch", clock.minute + 5)
    seen = []
    ticker = CountdownTicker(store, seen.append, interval_seconds=0.01)

    ticker.start()
    ticker.start()
    await asyncio.sleep(0.05)
    await ticker.stop()
    count = len(seen)
    await asyncio.sleep(0.05)

    assert count >= 1
    assert len(seen) == count
    assert not ticker.running


@pytest.mark.asyncio
async def test_failing_callback_keeps_loop_alive(store, clock):
    await store.create_timer("launch", clock.minute + 5)
    calls = []

    def on_tick(views):
        calls.append(views)
        if len(calls) == 1:
            raise RuntimeError("render failed")

    async with CountdownTicker(store, on_tick, interval_seconds=0.01) as ticker:
        await asyncio.sleep(0.05)
        assert ticker.running
    assert len(calls) >= 2


@pytest.mark.asyncio
async def test_stop_before_start_is_harmless(store):
    await CountdownTicker(store, lambda views: None).stop()
