# fanbase/core/clock.py

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Source of the current time for time-gated operations."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock returning timezone-aware UTC datetimes."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


system_clock = SystemClock()


def get_clock() -> Clock:
    """
    FastAPI dependency returning the clock used by request handlers.
    Tests override it with a controllable clock.
    """
    return system_clock
