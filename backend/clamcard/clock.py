"""Time sources used by the card."""

from datetime import datetime, timedelta
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """
    Interface for the current date-time.
    Anything with a no-argument now() returning a datetime can drive a card.
    """

    def now(self) -> datetime:
        """Return the current date and time."""
        ...


class SystemClock:
    """Wall clock in local time."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """
    Clock that only moves when told to.
    Used by tests and simulations that need deterministic journey dates.
    """

    def __init__(self, moment: datetime):
        self._moment = moment

    def now(self) -> datetime:
        return self._moment

    def set(self, moment: datetime) -> None:
        """Jump to an exact moment."""
        self._moment = moment

    def advance(self, delta: timedelta) -> datetime:
        """Move the clock forward and return the new moment."""
        self._moment = self._moment + delta
        return self._moment
