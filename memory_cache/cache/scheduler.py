"""
Background maintenance timers.

Each PeriodicTask runs its callback on a daemon thread every `interval`
seconds until stopped. The cache manager owns two of them: one for the
cleanup pass and one for the stats recomputation.
"""

import logging
import math
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicTask:
    """
    Repeating background callback.

    The first tick happens one interval after start(). A tick that raises
    is logged and the task keeps running. stop() waits for an in-flight
    tick to finish; no tick starts after stop() returns.

    Attributes:
        name: Thread name, used in logs
        interval: Seconds between ticks
    """

    def __init__(self, name: str, interval: float, callback: Callable[[], object]):
        if not 0 < interval < math.inf:
            raise ValueError(f"interval must be finite and positive, got {interval!r}")
        self.name = name
        self.interval = interval
        self._callback = callback
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Start the background thread (no-op if already running)."""
        if self._thread is not None:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        logger.debug(f"Started {self.name} every {self.interval}s")

    def stop(self) -> None:
        """Stop the thread and wait for it to exit. Safe to call repeatedly."""
        self._stop_event.set()

        thread, self._thread = self._thread, None
        if thread is None:
            return

        # A callback stopping its own task must not join itself
        if thread is not threading.current_thread():
            thread.join()
        logger.debug(f"Stopped {self.name}")

    def is_running(self) -> bool:
        """Check if the task is scheduled to tick."""
        return self._thread is not None and not self._stop_event.is_set()

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval):
            try:
                self._callback()
            except Exception:
                logger.exception(f"{self.name} tick failed")


class MaintenanceScheduler:
    """
    The cleanup and stats timers of one cache manager.

    Usage:
        scheduler = MaintenanceScheduler(
            cleanup=cache.run_maintenance, cleanup_interval=60,
            stats=cache.refresh_stats, stats_interval=30,
        )
        scheduler.start()
        ...
        scheduler.stop()
    """

    def __init__(
            self,
            cleanup: Callable[[], object],
            cleanup_interval: float,
            stats: Callable[[], object],
            stats_interval: float,
    ):
        self.cleanup_task = PeriodicTask("cache-cleanup", cleanup_interval, cleanup)
        self.stats_task = PeriodicTask("cache-stats", stats_interval, stats)

    def start(self) -> None:
        self.cleanup_task.start()
        self.stats_task.start()

    def stop(self) -> None:
        """Stop both timers; returns once neither can fire again."""
        self.cleanup_task.stop()
        self.stats_task.stop()

    def is_running(self) -> bool:
        return self.cleanup_task.is_running() or self.stats_task.is_running()
