"""Minimum-interval request pacing for the E-utilities rate limit."""

from __future__ import annotations

import logging
import time
from typing import Callable

LOGGER = logging.getLogger(__name__)


class RequestThrottle:
    """Keep at least ``min_interval`` seconds between consecutive remote calls.

    ``mark()`` records when a call finished; ``wait()`` sleeps for whatever is
    left of the interval since the last mark. Calling ``wait()`` twice in a row
    only sleeps once, so the driver and the client can both ask for pacing
    without stacking delays.
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if min_interval < 0:
            raise ValueError(f"min_interval must be >= 0, got {min_interval}")
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_call: float | None = None

    def wait(self) -> None:
        if self._last_call is None:
            return
        remaining = self.min_interval - (self._clock() - self._last_call)
        if remaining > 0:
            LOGGER.debug("Throttle: sleeping %.3fs", remaining)
            self._sleep(remaining)

    def mark(self) -> None:
        self._last_call = self._clock()
