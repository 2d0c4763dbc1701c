# mutualpool/core/clock.py
"""Trusted current-time source."""

import time
from abc import ABC, abstractmethod


class Clock(ABC):
    """Returns the current time as whole unix seconds."""

    @abstractmethod
    def now(self) -> int:
        pass


class SystemClock(Clock):

    def now(self) -> int:
        return int(time.time())
