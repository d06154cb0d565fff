"""
Periodic background runner for the commit pipeline.

The scheduler snapshots the interval and repository path when it starts, so
configuration saved while it runs only takes effect on the next start.
Stopping is cooperative: the loop notices at its next tick and never
interrupts a pipeline run that is already in progress.
"""

import asyncio
import threading
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from loguru import logger

from autocommit.config_store import ConfigStore
from autocommit.errors import AutoCommitError, ConcurrencyError, ConfigError
from autocommit.models.state import CommitOutcome

COMMIT_STATUS_EVENT = "commit-status"
COMMIT_ERROR_EVENT = "commit-error"

RunPipeline = Callable[[str], Awaitable[CommitOutcome]]
Notify = Callable[[str, str], None]


@dataclass
class _LoopHandle:
    """Run-state of one started loop. A stopped handle is never revived."""

    repo_path: str
    interval_seconds: float
    stopped: bool = False
    task: Optional[asyncio.Task] = None


class Scheduler:
    """Drives the pipeline on a fixed interval. At most one loop is active."""

    def __init__(
        self,
        config_store: ConfigStore,
        run_pipeline: RunPipeline,
        notify: Notify,
        seconds_per_minute: float = 60.0,
    ):
        self.config_store = config_store
        self.run_pipeline = run_pipeline
        self.notify = notify
        self.seconds_per_minute = seconds_per_minute
        self._lock = threading.Lock()
        self._current: Optional[_LoopHandle] = None
        self._last_handle: Optional[_LoopHandle] = None

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._current is not None

    def start(self) -> None:
        """Start the periodic loop. Must be called from inside a running event loop.

        Raises:
            ConcurrencyError: If a loop is already active.
            ConfigError: If the configured interval is not positive.
        """
        loop = asyncio.get_running_loop()
        config = self.config_store.get()

        with self._lock:
            if self._current is not None:
                raise ConcurrencyError("Timer is already running")
            if config.interval_minutes <= 0:
                raise ConfigError(f"Interval must be a positive number of minutes, got {config.interval_minutes}")
            handle = _LoopHandle(
                repo_path=config.repo_path,
                interval_seconds=config.interval_minutes * self.seconds_per_minute,
            )
            self._current = handle
            self._last_handle = handle

        handle.task = loop.create_task(self._run_loop(handle))
        logger.info(f"Auto-commit started for {handle.repo_path} every {config.interval_minutes} minute(s)")

    def stop(self) -> None:
        """Mark the active loop as stopped. Does not wait for it."""
        with self._lock:
            handle, self._current = self._current, None
            if handle is None:
                return
            handle.stopped = True
        logger.info("Auto-commit stopped")

    async def wait_closed(self) -> None:
        """Wait for the most recently started loop to exit (after stop())."""
        with self._lock:
            handle = self._last_handle
        if handle is not None and handle.task is not None:
            await handle.task

    async def _run_loop(self, handle: _LoopHandle) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time()

        while True:
            delay = next_tick - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)
            # Missed ticks are not replayed; realign on the current time
            next_tick = max(next_tick + handle.interval_seconds, loop.time())

            if handle.stopped:
                logger.debug("Scheduler loop exiting")
                return

            await self._tick(handle)

    async def _tick(self, handle: _LoopHandle) -> None:
        try:
            outcome = await self.run_pipeline(handle.repo_path)
        except AutoCommitError as e:
            logger.error(f"Scheduled commit failed: {e}")
            self._emit(COMMIT_ERROR_EVENT, str(e))
            return
        except Exception as e:
            logger.exception("Unexpected failure in scheduled commit")
            self._emit(COMMIT_ERROR_EVENT, str(e) or e.__class__.__name__)
            return

        if outcome.committed:
            self._emit(COMMIT_STATUS_EVENT, outcome.message)

    def _emit(self, event: str, payload: str) -> None:
        try:
            self.notify(event, payload)
        except Exception:
            logger.exception(f"Listener for {event} failed")
