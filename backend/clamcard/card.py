"""The fare card: journey state machine and journey history."""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from clamcard.clock import Clock
from clamcard.exceptions import (
    InvalidArgumentError,
    JourneyConflictError,
    NoJourneyInProgressError,
)
from clamcard.models import Journey, Station
from clamcard.services.fare_calculator import FareCalculatorInterface, get_fare_calculator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    """No journey is open."""


@dataclass(frozen=True)
class InProgress:
    """A journey is open, started at `station`."""
    station: Station


CardState = Union[Idle, InProgress]


class Card:
    """
    A contactless card tracking one journey at a time.

    The card owns its history list and state; stations and zones are borrowed.
    It is not thread-safe: callers sharing a card must serialise
    start_journey/end_journey themselves.
    """

    def __init__(self, clock: Clock, journey_history: Iterable[Journey],
                 fare_calculator: Optional[FareCalculatorInterface] = None):
        if clock is None:
            raise InvalidArgumentError("clock is required")
        if journey_history is None:
            raise InvalidArgumentError("journey_history is required")

        self._clock = clock
        self._journey_history: List[Journey] = list(journey_history)
        self._fare_calculator = fare_calculator or get_fare_calculator()
        self._state: CardState = Idle()

    @property
    def state(self) -> CardState:
        return self._state

    @property
    def current_journey_start_from(self) -> Optional[Station]:
        if isinstance(self._state, InProgress):
            return self._state.station
        return None

    @property
    def is_journey_in_progress(self) -> bool:
        return isinstance(self._state, InProgress)

    @property
    def journey_history(self) -> Tuple[Journey, ...]:
        """Completed journeys in the order they were completed."""
        return tuple(self._journey_history)

    def start_journey(self, station: Station) -> None:
        if station is None:
            raise InvalidArgumentError("station is required")
        if isinstance(self._state, InProgress):
            raise JourneyConflictError("A journey is already underway")

        self._state = InProgress(station)
        logger.debug("Journey started at %s", station.name)

    def end_journey(self, station: Station) -> Optional[Journey]:
        """
        Close the open journey at `station`.

        Returns:
            The charged Journey, or None when the journey ends where it
            started (cancelled, nothing charged or recorded).

        Raises:
            InvalidArgumentError: station is None
            NoJourneyInProgressError: no journey is open
        """
        if station is None:
            raise InvalidArgumentError("station is required")
        if not isinstance(self._state, InProgress):
            raise NoJourneyInProgressError("No journey currently underway")

        start = self._state.station
        if start == station:
            self._state = Idle()
            logger.info("Journey from %s cancelled, tapped out at the same station", start.name)
            return None

        return self._complete_journey(start, station)

    def _complete_journey(self, start: Station, end: Station) -> Journey:
        now = self._clock.now()
        cost = self._fare_calculator.calculate_fare(start, end, now, self._journey_history)
        journey = Journey(date=now, from_station=start, to_station=end, cost=cost)

        self._state = Idle()
        self._journey_history.append(journey)
        logger.info("Journey %s -> %s charged %s", start.name, end.name, cost)
        return journey
