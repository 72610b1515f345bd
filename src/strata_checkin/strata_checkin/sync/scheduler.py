from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

from ..common.logging_setup import get_logger

log = get_logger("scheduler")


class PeriodicTask:
    """Cancellable fixed-interval task on the running event loop.

    ``stop()`` cancels the waiting loop but lets a callback that is already
    running finish. ``tick()`` runs the callback once on demand, which is how
    tests drive it without wall-clock time.
    """

    def __init__(
        self,
        callback: Callable[[], Awaitable[Any]],
        interval_seconds: float,
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        name: str = "periodic-task",
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._callback = callback
        self._interval = float(interval_seconds)
        self._sleep = sleep
        self._name = name
        self._task: Optional[asyncio.Task] = None
        self._inflight: set[asyncio.Task] = set()

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def is_active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_active:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(), name=self._name)
        log.debug("Started %s (every %.0fs)", self._name, self._interval)

    def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        log.debug("Stopped %s", self._name)

    async def tick(self) -> Any:
        return await self._callback()

    async def _run(self) -> None:
        while True:
            await self._sleep(self._interval)
            run = asyncio.ensure_future(self._callback())
            self._inflight.add(run)
            run.add_done_callback(self._on_done)
            try:
                await asyncio.shield(run)
            except asyncio.CancelledError:
                raise
            except Exception:
                # Logged by _on_done, which also covers runs that outlive stop().
                continue

    def _on_done(self, run: asyncio.Future) -> None:
        self._inflight.discard(run)
        if run.cancelled():
            return
        exc = run.exception()
        if exc is not None:
            log.error("%s failed; will retry on the next tick", self._name, exc_info=exc)
