"""Drift-corrected periodic tasks on the asyncio loop."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Dict, List, Optional, Union

LOGGER = logging.getLogger("osc_repl.scheduler")

TickResult = Optional[bool]
TickCallback = Callable[[float], Union[TickResult, Awaitable[TickResult]]]
CancelFn = Callable[[], None]


class PeriodicTask:
    """Invoke *callback* every *interval* seconds until cancelled or told to stop.

    The callback receives the seconds elapsed since the task started and may
    be a coroutine function.  Returning ``False`` ends the task.  Each tick is
    aimed at ``start + n * interval`` rather than ``now + interval``, so a
    slow callback does not push every later tick back.  With ``immediate=False``
    the first tick waits one interval.
    """

    def __init__(self, key: str, interval: float, callback: TickCallback, *, immediate: bool = True) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.key = key
        self.interval = float(interval)
        self.callback = callback
        self.immediate = immediate
        self.started_at: Optional[float] = None
        self.ticks = 0
        self._cancelled = False
        self._task: Optional[asyncio.Task] = None
        self._listeners: List[Callable[["PeriodicTask"], None]] = []

    @property
    def active(self) -> bool:
        return not self._cancelled and self._task is not None and not self._task.done()

    def add_done_callback(self, callback: Callable[["PeriodicTask"], None]) -> None:
        self._listeners.append(callback)

    def start(self) -> "PeriodicTask":
        if self._task is None:
            self._task = asyncio.ensure_future(self._run())
            self._task.add_done_callback(self._finished)
        return self

    def cancel(self) -> None:
        """Stop the task; no further tick runs, even one already awaiting."""
        if self._cancelled:
            return
        self._cancelled = True
        task = self._task
        if task is not None and not task.done():
            task.cancel()

    async def wait(self) -> None:
        task = self._task
        if task is None:
            return
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        self.started_at = loop.time()
        target = self.started_at
        try:
            if not self.immediate:
                target += self.interval
                await asyncio.sleep(self.interval)
            while not self._cancelled:
                result = self.callback(loop.time() - self.started_at)
                if inspect.isawaitable(result):
                    result = await result
                self.ticks += 1
                if self._cancelled or result is False:
                    break
                target += self.interval
                await asyncio.sleep(max(0.0, target - loop.time()))
        except asyncio.CancelledError:
            if not self._cancelled:
                raise
        except Exception:
            LOGGER.exception("periodic task %s failed", self.key)
        finally:
            self._cancelled = True

    def _finished(self, _task: asyncio.Task) -> None:
        self._cancelled = True
        for listener in list(self._listeners):
            listener(self)


class PeriodicScheduler:
    """Keyed set of periodic tasks; at most one live task per key."""

    def __init__(self) -> None:
        self._tasks: Dict[str, PeriodicTask] = {}

    def schedule(
        self, key: str, interval: float, callback: TickCallback, *, immediate: bool = True
    ) -> CancelFn:
        self.cancel(key)
        task = PeriodicTask(key, interval, callback, immediate=immediate)
        task.add_done_callback(self._forget)
        self._tasks[key] = task
        task.start()
        LOGGER.debug("scheduled %s every %.3fs", key, interval)
        return task.cancel

    def cancel(self, key: str) -> bool:
        task = self._tasks.pop(key, None)
        if task is None:
            return False
        task.cancel()
        LOGGER.debug("cancelled %s", key)
        return True

    def cancel_all(self) -> int:
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        return len(tasks)

    def get(self, key: str) -> Optional[PeriodicTask]:
        return self._tasks.get(key)

    def keys(self) -> List[str]:
        return sorted(self._tasks)

    def _forget(self, task: PeriodicTask) -> None:
        if self._tasks.get(task.key) is task:
            del self._tasks[task.key]

    def __contains__(self, key: object) -> bool:
        return key in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)


__all__ = ["PeriodicTask", "PeriodicScheduler", "TickCallback", "CancelFn"]
