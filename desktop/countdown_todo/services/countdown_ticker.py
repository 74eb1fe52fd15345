"""Countdown Ticker — recurring recompute of timer views between backend refreshes.

Invariants:
    - Never issues backend commands; reads TrackerState only
    - A tick with no timers is skipped entirely (on_tick not called)
    - stop() cancels the task and waits for it: nothing is rescheduled afterwards
    - An exception from on_tick is logged and does not end the loop

Design Decisions:
    - Single asyncio task with sleep-after-work: ticks never overlap, a slow
      on_tick delays the next tick instead of stacking them
    - on_tick may be sync or async
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

from countdown_todo.core.timer_view import TimerView
from countdown_todo.services.tracker_store import TrackerStore

logger = logging.getLogger(__name__)

TickCallback = Callable[[list[TimerView]], Awaitable[None] | None]


class CountdownTicker:
    """Runs on_tick(views) every interval while started."""

    def __init__(
        self, store: TrackerStore, on_tick: TickCallback,
        interval_seconds: float = 1.0,
    ):
        self._store = store
        self._on_tick = on_tick
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def tick(self) -> bool:
        """Run one recompute. Returns False when skipped (no timers)."""
        if not self._store.state.has_timers:
            return False
        views = self._store.views()
        result = self._on_tick(views)
        if inspect.isawaitable(result):
            await result
        return True

    async def _run(self) -> None:
        while True:
            try:
                await self.tick()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning(f"Countdown tick failed: {e}", exc_info=True)
            await asyncio.sleep(self._interval)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def __aenter__(self) -> "CountdownTicker":
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
