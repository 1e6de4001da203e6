"""Minimum-interval throttle shared by every background generation call."""

import logging
import threading
import time
from typing import Callable

logger = logging.getLogger(__name__)


class RateLimiter:
    """Spaces dispatches at least `min_interval` seconds apart.

    The lock is held while waiting, so concurrent callers queue up behind each
    other instead of racing on the last-dispatch timestamp.
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._last_dispatch: float | None = None

    def acquire(self) -> float:
        """Block until a dispatch is allowed. Returns the seconds waited."""
        with self._lock:
            waited = 0.0
            if self._last_dispatch is not None:
                elapsed = self._clock() - self._last_dispatch
                if elapsed < self.min_interval:
                    waited = self.min_interval - elapsed
                    logger.debug(f"Throttling background request for {waited:.2f}s")
                    self._sleep(waited)
            self._last_dispatch = self._clock()
            return waited

    @property
    def last_dispatch(self) -> float | None:
        return self._last_dispatch
