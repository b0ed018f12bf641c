"""Token-bucket pacing shared by every outbound API call."""

import logging
import threading
import time
from collections.abc import Callable

from ..errors import ConfigurationError

log = logging.getLogger(__name__)

WINDOW_SECONDS = 900.0


class RateLimiter:
    """Blocking token bucket: ``quota`` requests per ``window`` seconds.

    The bucket starts full (burst of ``quota``) and refills continuously at
    ``quota / window`` tokens per second, never beyond ``quota``.
    """

    def __init__(
        self,
        quota: int,
        window: float = WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if isinstance(quota, bool) or not isinstance(quota, int) or quota <= 0:
            raise ConfigurationError("rate_limit_per_15min must be greater than zero")
        if window <= 0:
            raise ConfigurationError("invalid rate limit period")

        self.quota = quota
        self.window = window
        self._rate = quota / window
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._tokens = float(quota)
        self._updated = clock()

    def _refill(self, now: float) -> None:
        elapsed = max(0.0, now - self._updated)
        self._tokens = min(float(self.quota), self._tokens + elapsed * self._rate)
        self._updated = now

    def try_acquire(self) -> float:
        """Take a token if one is available.

        Returns 0 on success, otherwise the seconds until a token will be.
        """
        with self._lock:
            self._refill(self._clock())
            if self._tokens >= 1.0:
                self._tokens -= 1.0
                return 0.0
            return (1.0 - self._tokens) / self._rate

    def acquire(self) -> None:
        """Block until one unit of quota is available, then consume it."""
        while True:
            wait = self.try_acquire()
            if wait <= 0:
                return
            log.debug("Rate limiter sleeping %.2fs", wait)
            self._sleep(wait)

    @property
    def available(self) -> float:
        with self._lock:
            self._refill(self._clock())
            return self._tokens
