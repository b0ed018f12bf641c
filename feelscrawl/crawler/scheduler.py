"""Periodic, single-flight execution of crawl cycles with cooperative shutdown."""

from __future__ import annotations

import logging
import signal
import threading
from collections.abc import Callable
from pathlib import Path

from ..db import get_connection
from ..models import FeelsConfig
from .cycle import CycleResult, TweetSource, run_crawl_cycle

log = logging.getLogger(__name__)

CycleFn = Callable[[threading.Event], CycleResult]


def database_cycle(client: TweetSource, settings: FeelsConfig, db_path: Path | None = None) -> CycleFn:
    """Build a cycle function that opens one connection per cycle."""

    def _run(shutdown: threading.Event) -> CycleResult:
        with get_connection(db_path) as conn:
            return run_crawl_cycle(conn, client, settings, shutdown)

    return _run


class Scheduler:
    """Runs ``cycle_fn`` every ``interval_seconds`` until shutdown.

    At most one cycle runs at a time; a trigger that arrives while a cycle
    is in progress is dropped, not queued.
    """

    def __init__(
        self,
        cycle_fn: CycleFn,
        interval_seconds: float,
        shutdown: threading.Event | None = None,
    ) -> None:
        self.cycle_fn = cycle_fn
        self.interval_seconds = interval_seconds
        self.shutdown = shutdown or threading.Event()
        self.last_result: CycleResult | None = None
        self._running = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._running.locked()

    def trigger(self) -> bool:
        """Run one cycle now unless one is already running.

        Returns False when the trigger was dropped. Exceptions from the
        cycle propagate after the guard is released.
        """
        if not self._running.acquire(blocking=False):
            log.info("Crawl cycle already in progress, skipping trigger")
            return False
        try:
            self.last_result = self.cycle_fn(self.shutdown)
        finally:
            self._running.release()
        return True

    def run_forever(self) -> None:
        """Run a cycle immediately, then once per interval until shutdown."""
        log.info("Scheduler started (interval %.0fs)", self.interval_seconds)
        while not self.shutdown.is_set():
            try:
                self.trigger()
            except Exception as e:
                log.error("Crawl cycle failed: %s", e)

            if self.shutdown.wait(self.interval_seconds):
                break
        log.info("Scheduler stopped")

    def request_shutdown(self) -> None:
        self.shutdown.set()

    def install_signal_handlers(self) -> None:
        """Set the shutdown token on SIGINT / SIGTERM. Must run on the main thread."""

        def _handler(signum, frame):
            log.info("Received signal %s, shutting down...", signal.Signals(signum).name)
            self.shutdown.set()

        signal.signal(signal.SIGINT, _handler)
        signal.signal(signal.SIGTERM, _handler)
