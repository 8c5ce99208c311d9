"""Background periodic tasks.

Used to run the rate limiter and plan store sweeps on a wall-clock interval,
independent of request traffic. Each task owns its asyncio task handle and is
started and stopped from the application lifespan.

Usage:
    sweeper = PeriodicTask("plan_store.sweep", store.sweep, interval_seconds=86400)
    await sweeper.start()
    ...
    await sweeper.stop()
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Run a synchronous callback every ``interval_seconds``.

    The first run happens one interval after :meth:`start`. Errors raised by
    the callback are logged and do not stop the loop.
    """

    def __init__(
        self,
        name: str,
        callback: Callable[[], Any],
        *,
        interval_seconds: float,
        stop_timeout: float = 5.0,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")

        self.name = name
        self._callback = callback
        self._interval = interval_seconds
        self._stop_timeout = stop_timeout
        self._task: asyncio.Task | None = None
        self._stop_event: asyncio.Event | None = None
        self.runs = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the background loop on the running event loop."""
        if self._task is not None:
            logger.debug("periodic_task.already_running", extra={"task": self.name})
            return

        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run(), name=self.name)
        logger.info(
            "periodic_task.started",
            extra={"task": self.name, "interval_s": self._interval},
        )

    async def stop(self) -> None:
        """Signal the loop to stop, cancelling it if it does not finish in time."""
        if self._task is None:
            return

        assert self._stop_event is not None
        self._stop_event.set()

        try:
            await asyncio.wait_for(self._task, timeout=self._stop_timeout)
        except asyncio.TimeoutError:
            logger.warning("periodic_task.cancelled", extra={"task": self.name})
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        finally:
            self._task = None
            self._stop_event = None
            logger.info("periodic_task.stopped", extra={"task": self.name, "runs": self.runs})

    def run_once(self) -> Any:
        """Invoke the callback immediately, outside the schedule."""
        result = self._callback()
        self.runs += 1
        return result

    async def _run(self) -> None:
        assert self._stop_event is not None
        stop_event = self._stop_event

        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                pass
            else:
                break

            try:
                self.run_once()
            except Exception:
                logger.exception("periodic_task.failed", extra={"task": self.name})
