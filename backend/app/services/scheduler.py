"""Periodic runner for scheduled analysis.

The loop suspends in exactly two places per iteration: waiting for the next
fire instant and awaiting the action. A stop request is honoured at every
wait, and stop() also cancels an action that is still running.

Action failures are not handled here. Actions are expected to log and
contain their own errors (see AnalysisJob.run).
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Protocol, runtime_checkable

from core.schedule import next_execution_time

logger = logging.getLogger(__name__)

# Wait used when the computed delay is not positive (clock skew)
FALLBACK_WAIT_SECONDS = 60.0
# Pause after each run before computing the next fire time
COOLDOWN_SECONDS = 5.0


@runtime_checkable
class ScheduledAction(Protocol):
    """A zero-argument asynchronous operation run on each fire."""

    async def run(self) -> None:
        ...


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Scheduler:
    """Fires an action at each next_execution_time for a mode, until stopped."""

    def __init__(
        self,
        mode: str,
        action: ScheduledAction,
        clock: Callable[[], datetime] = utc_now,
        fallback_wait: float = FALLBACK_WAIT_SECONDS,
        cooldown: float = COOLDOWN_SECONDS,
    ):
        self.mode = mode
        self.action = action
        self._clock = clock
        self._fallback_wait = fallback_wait
        self._cooldown = cooldown

        self._stop_event = asyncio.Event()
        self._task: asyncio.Task | None = None
        self._next_execution: datetime | None = None
        self.iterations = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def next_execution(self) -> datetime | None:
        """Fire instant the loop is currently waiting for."""
        return self._next_execution

    def wait_seconds(self, now: datetime, next_time: datetime) -> float:
        """Seconds to sleep until next_time, or the fallback wait if not positive."""
        delay = (next_time - now).total_seconds()
        if delay <= 0:
            return self._fallback_wait
        return delay

    async def _wait(self, seconds: float) -> bool:
        """Sleep for `seconds`. Returns True if a stop was requested meanwhile."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True

    async def run_forever(self) -> None:
        """Run the schedule loop until stop() is called."""
        logger.info(f"Starting scheduler, mode: {self.mode}")

        while not self._stop_event.is_set():
            now = self._clock()
            next_time = next_execution_time(self.mode, now)
            self._next_execution = next_time
            delay = self.wait_seconds(now, next_time)

            logger.info(
                f"Next execution time: {next_time:%Y-%m-%d %H:%M:%S} UTC, "
                f"waiting {int(delay)} seconds"
            )
            if await self._wait(delay):
                break

            logger.info("Executing scheduled task")
            await self.action.run()
            self.iterations += 1

            if await self._wait(self._cooldown):
                break

        self._next_execution = None
        logger.info(f"Scheduler stopped, mode: {self.mode}")

    async def start(self) -> None:
        """Start the loop as a background task."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._task = asyncio.create_task(self.run_forever())

    async def join(self) -> None:
        """Wait until the loop task finishes, whether stopped or failed."""
        if self._task:
            await asyncio.wait({self._task})

    async def stop(self) -> None:
        """Request a stop and wait for the loop to exit.

        A loop that already ended because the action raised is logged here
        rather than re-raised.
        """
        self._stop_event.set()
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            except Exception:
                logger.exception(f"Scheduler loop failed, mode: {self.mode}")
            self._task = None
