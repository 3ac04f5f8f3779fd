"""Hosts the single card: resolves stations, serialises taps, persists journeys."""

import logging
import threading
from typing import List, Optional

from clamcard.card import Card
from clamcard.clock import Clock, SystemClock
from clamcard.database import DatabaseManager, get_db_manager
from clamcard.exceptions import StationNotFoundError
from clamcard.models import Journey, SpendingSummary, Station
from clamcard.services.fare_calculator import (
    FareCalculatorInterface,
    sum_cost_in_week,
    sum_cost_on_day,
    week_of,
)

logger = logging.getLogger(__name__)


class CardService:
    """
    Wraps one Card with the collaborators a running application needs.
    All state-changing calls go through a single lock.
    """

    def __init__(self, db_manager: DatabaseManager, clock: Clock,
                 fare_calculator: Optional[FareCalculatorInterface] = None):
        self.db_manager = db_manager
        self.clock = clock
        self._lock = threading.Lock()
        self._fare_calculator = fare_calculator

        history = db_manager.load_journey_history()
        self.card = Card(clock, history, fare_calculator)
        logger.info("Card loaded with %d journeys", len(history))

    def resolve_station(self, name: str) -> Station:
        """
        Look up a station by name.

        Raises:
            StationNotFoundError: If the name is not in the catalog
        """
        station = self.db_manager.get_station(name)
        if station is None:
            raise StationNotFoundError(name)
        return station

    def tap_in(self, station_name: str) -> Station:
        station = self.resolve_station(station_name)
        with self._lock:
            self.card.start_journey(station)
        return station

    def tap_out(self, station_name: str) -> Optional[Journey]:
        """
        End the open journey.

        Returns:
            The charged journey, or None if the journey was cancelled.
        """
        station = self.resolve_station(station_name)
        with self._lock:
            journey = self.card.end_journey(station)
            if journey is not None:
                try:
                    self.db_manager.save_journey(journey)
                except Exception:
                    logger.exception("Could not store journey, reloading card from database")
                    self.card = Card(self.clock, self.db_manager.load_journey_history(),
                                     self._fare_calculator)
                    raise
        return journey

    def history(self) -> List[Journey]:
        with self._lock:
            return list(self.card.journey_history)

    def current_station(self) -> Optional[Station]:
        with self._lock:
            return self.card.current_journey_start_from

    def spending_summary(self) -> SpendingSummary:
        """Charges so far on the clock's current day and ISO week."""
        now = self.clock.now()
        iso_year, iso_week = week_of(now)
        history = self.history()
        return SpendingSummary(
            as_of=now,
            spent_today=sum_cost_on_day(history, now.date()),
            spent_this_week=sum_cost_in_week(history, iso_year, iso_week),
            iso_year=iso_year,
            iso_week=iso_week,
        )


# Singleton instance for the hosted card
_card_service: Optional[CardService] = None


def get_card_service() -> CardService:
    """Get the card service backed by the default database and wall clock."""
    global _card_service
    if _card_service is None:
        _card_service = CardService(get_db_manager(), SystemClock())
    return _card_service
