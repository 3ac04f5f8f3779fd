"""ClamCard contactless fare card with daily and weekly capping."""

from clamcard.card import Card, Idle, InProgress
from clamcard.clock import Clock, FixedClock, SystemClock
from clamcard.models import Journey, Station, Zone

__all__ = [
    "Card",
    "Idle",
    "InProgress",
    "Clock",
    "FixedClock",
    "SystemClock",
    "Journey",
    "Station",
    "Zone",
]
