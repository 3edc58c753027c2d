"""Clock sources. A clock is any zero-argument callable returning integer seconds."""

import threading
from datetime import datetime, timezone


class SystemClock:
    """Wall-clock seconds (UTC) that never go backwards."""

    def __init__(self):
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self):
        now = int(datetime.now(timezone.utc).timestamp())
        with self._lock:
            if now > self._last:
                self._last = now
            return self._last


class ManualClock:
    """
    Clock advanced by hand, for tests and simulations.

    Usage:
        clock = ManualClock(1000)
        clock.increase(121)
        clock()  # 1121
    """

    def __init__(self, start=0):
        _require_int(start)
        if start < 0:
            raise ValueError('NameRegistrar: clock start must be non-negative')
        self._now = start

    def __call__(self):
        return self._now

    def increase(self, seconds):
        _require_int(seconds)
        if seconds < 0:
            raise ValueError('NameRegistrar: clock cannot move backwards')
        self._now += seconds
        return self._now

    def set(self, t):
        _require_int(t)
        if t < self._now:
            raise ValueError('NameRegistrar: clock cannot move backwards')
        self._now = t
        return self._now


def _require_int(value):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError('NameRegistrar: clock values must be integers')
