"""
Timer loop that runs the refresh sequence every interval.
"""

from __future__ import annotations
import asyncio
import contextlib
import logging
from typing import Awaitable, Callable, Optional

from deskrefresh.config import RefreshConfig
from deskrefresh.playback.os_controller import InjectionError
from deskrefresh.playback.refresh_sequence import RefreshSequence

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """
    Runs a RefreshSequence repeatedly until told to stop.

    The loop settles for ``config.settle_delay`` seconds, then alternates
    between running the sequence and waiting ``config.interval`` minutes.
    Setting the stop event (see ``stop()``) ends the loop at once, whether
    it is settling, sequencing or waiting. A failed sequence is reported and
    retried after the normal interval.

    Usage:
        scheduler = RefreshScheduler(sequence, RefreshConfig(interval=10))
        scheduler.on_attempt = lambda n: print(f"attempt {n}")
        attempts = await scheduler.run()
    """

    def __init__(
        self,
        sequence: RefreshSequence,
        config: RefreshConfig | None = None,
        stop_event: asyncio.Event | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.sequence = sequence
        self.config = config or RefreshConfig()
        self._stop_event = stop_event
        self._sleep = sleep

        # Callbacks
        self.on_attempt: Optional[Callable[[int], None]] = None
        self.on_success: Optional[Callable[[int], None]] = None
        self.on_failure: Optional[Callable[[int, InjectionError], None]] = None

    @property
    def stop_event(self) -> asyncio.Event:
        # Created lazily so it binds to the loop that runs the scheduler
        if self._stop_event is None:
            self._stop_event = asyncio.Event()
        return self._stop_event

    def stop(self) -> None:
        """Ask the running loop to terminate."""
        self.stop_event.set()

    async def run(self) -> int:
        """
        Run until stopped.

        Returns:
            Number of sequence attempts that were started.
        """
        attempts = 0

        logger.info(f"Settling for {self.config.settle_delay}s before the first refresh")
        if await self._until_stopped(self._sleep(self.config.settle_delay)):
            return attempts

        while True:
            attempts += 1
            logger.info(f"Refresh attempt {attempts}")
            if self.on_attempt:
                self.on_attempt(attempts)

            try:
                if await self._until_stopped(self.sequence.perform()):
                    return attempts
            except InjectionError as e:
                # Shown to the user through on_failure
                logger.info(f"Refresh attempt {attempts} failed: {e}")
                if self.on_failure:
                    self.on_failure(attempts, e)
            else:
                if self.on_success:
                    self.on_success(attempts)

            if await self._until_stopped(self._sleep(self.config.interval_seconds)):
                return attempts

    async def _until_stopped(self, aw: Awaitable[None]) -> bool:
        """
        Await ``aw`` unless the stop event fires first.

        Returns True if the loop should terminate. The stop wins when both
        finish together. Exceptions raised by ``aw`` propagate otherwise.
        """
        stop_event = self.stop_event
        task = asyncio.ensure_future(aw)
        if stop_event.is_set():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
            return True

        waiter = asyncio.ensure_future(stop_event.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task

        if stop_event.is_set():
            if not task.cancelled() and task.exception() is not None:
                logger.debug(f"Ignoring error from interrupted step: {task.exception()}")
            return True
        task.result()
        return False
