"""Cancellable repeating timer for the asyncio event loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class TickScheduler:
    """Calls *callback* every *interval_ms* milliseconds until stopped.

    Each callback runs to completion before the next sleep starts, so ticks
    never overlap. Changing the interval cancels the running task and starts
    a new one; a generation counter keeps a cancelled task from firing even
    if it already woke up.
    """

    def __init__(self, callback: Callable[[], object], interval_ms: int) -> None:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive.")
        self.callback = callback
        self.interval_ms = interval_ms
        self._generation = 0
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking. Must be called from inside a running event loop."""
        self._cancel()
        self._generation += 1
        self._task = asyncio.get_running_loop().create_task(
            self._run(self._generation),
        )

    def stop(self) -> None:
        """Cancel the pending tick, if any."""
        self._cancel()
        self._generation += 1

    def set_interval(self, interval_ms: int) -> None:
        """Switch to a new period, rescheduling if currently running."""
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive.")
        if interval_ms == self.interval_ms:
            return
        self.interval_ms = interval_ms
        if self.running:
            self.start()

    async def aclose(self) -> None:
        """Stop and wait for the cancelled task to unwind."""
        task = self._cancel()
        self._generation += 1
        if task is not None and task is not _current_task():
            await asyncio.gather(task, return_exceptions=True)

    def _cancel(self) -> asyncio.Task | None:
        task = self._task
        self._task = None
        if task is not None and not task.done() and task is not _current_task():
            task.cancel()
        return task

    async def _run(self, generation: int) -> None:
        try:
            while generation == self._generation:
                await asyncio.sleep(self.interval_ms / 1000.0)
                if generation != self._generation:
                    break
                self.callback()
        except asyncio.CancelledError:
            logger.debug("Tick task (generation %d) cancelled.", generation)
        except Exception:
            logger.exception("Tick callback failed; scheduler stopped.")
            if generation == self._generation:
                self._task = None


def _current_task() -> asyncio.Task | None:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None
