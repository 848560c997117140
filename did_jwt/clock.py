"""
Time sources for issuance and verification.
"""

import time
from abc import ABC, abstractmethod


class TimeProvider(ABC):
    """Abstract source of the current time."""

    @abstractmethod
    def now_ms(self) -> int:
        """Current time in milliseconds since the epoch."""
        pass


class SystemTimeProvider(TimeProvider):
    """Wall clock."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)


class FixedTimeProvider(TimeProvider):
    """
    Always reports the same instant. Useful for "was valid at ..." checks
    and for issuing tokens dated in the future or past.
    """

    def __init__(self, timestamp_ms: int):
        self.timestamp_ms = timestamp_ms

    def now_ms(self) -> int:
        return self.timestamp_ms

    def advance(self, seconds: int) -> None:
        self.timestamp_ms += seconds * 1000
