# src/autoscaler/ticker.py
import asyncio
from typing import Callable, Optional

from src.log_handler.logging_config import get_logger

logger = get_logger(__name__)


class PeriodicTicker:
    """Runs a synchronous callback at a fixed rate on the running event loop.

    The ticker owns its asyncio task; ``cancel()`` stops future ticks and
    waits for the task to finish. A callback that is already executing is
    never interrupted since cancellation only lands on the sleep between
    ticks.
    """

    def __init__(self, period: float, callback: Callable[[], object], name: Optional[str] = None):
        if period <= 0:
            raise ValueError(f"Tick period must be positive, got {period}")
        self.period = period
        self.callback = callback
        self.name = name or "ticker"
        self.ticks = 0
        self.skipped = 0
        self._task: Optional[asyncio.Task] = None
        self._cancelled = False

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the first tick one period from now."""
        if self._task is not None or self._cancelled:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)

    async def cancel(self) -> None:
        self._cancelled = True
        task = self._task
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        next_at = loop.time() + self.period

        while not self._cancelled:
            delay = next_at - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)
            if self._cancelled:
                break

            try:
                self.callback()
            except Exception as e:
                logger.error(f"Unhandled error in {self.name} tick: {str(e)}")
            self.ticks += 1

            next_at += self.period
            now = loop.time()
            if next_at <= now:
                missed = int((now - next_at) // self.period) + 1
                self.skipped += missed
                next_at += missed * self.period
                logger.warning(f"{self.name} fell behind, skipped {missed} tick(s)")
