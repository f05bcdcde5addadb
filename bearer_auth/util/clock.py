# bearer_auth/util/clock.py
from abc import ABC, abstractmethod
from datetime import datetime, timezone


class Clock(ABC):
    """Supplies the current instant so expiry logic can be driven deterministically."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time as a timezone-aware datetime."""
        pass


class SystemClock(Clock):
    """Clock backed by the system wall clock, always in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
