"""Fare calculation service implementing the capping rules."""

import logging
from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional, Protocol, Tuple, runtime_checkable

from clamcard.models import FareBreakdown, Journey, Station

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def cost_per_single_journey(start: Station, end: Station) -> Decimal:
    """The dearer of the two zones' single-journey costs."""
    return max(start.zone.cost_per_single_journey, end.zone.cost_per_single_journey)


def cost_per_day_limit(start: Station, end: Station) -> Decimal:
    return max(start.zone.cost_per_day_limit, end.zone.cost_per_day_limit)


def cost_per_week_limit(start: Station, end: Station) -> Decimal:
    return max(start.zone.cost_per_week_limit, end.zone.cost_per_week_limit)


def limit_cost_to_max_amount(cost: Decimal, cost_upper_limit: Decimal,
                             amount_already_charged: Decimal) -> Decimal:
    """
    Clamp a cost so the running total does not pass the limit.

    Args:
        cost: Cost before this limit is applied
        cost_upper_limit: Cap for the period
        amount_already_charged: Amount charged earlier in the period

    Returns:
        The cost, reduced to whatever headroom remains under the cap.
        Never negative, even when earlier charges already exceed the cap.
    """
    if amount_already_charged + cost > cost_upper_limit:
        return max(cost_upper_limit - amount_already_charged, ZERO)
    return cost


def week_of(moment: datetime) -> Tuple[int, int]:
    """ISO (year, week) the moment falls in."""
    iso = moment.isocalendar()
    return iso[0], iso[1]


def sum_cost_on_day(journeys: Iterable[Journey], day: date) -> Decimal:
    return sum((j.cost for j in journeys if j.date.date() == day), ZERO)


def sum_cost_in_week(journeys: Iterable[Journey], iso_year: int, iso_week: int) -> Decimal:
    return sum(
        (j.cost for j in journeys if week_of(j.date) == (iso_year, iso_week)),
        ZERO,
    )


@runtime_checkable
class FareCalculatorInterface(Protocol):
    """
    Interface for fare calculation.
    The card depends on this protocol, not on a concrete calculator.
    """

    def calculate_breakdown(self, start: Station, end: Station, when: datetime,
                            history: Iterable[Journey]) -> FareBreakdown:
        """Work out the fare and the figures behind it."""
        ...

    def calculate_fare(self, start: Station, end: Station, when: datetime,
                       history: Iterable[Journey]) -> Decimal:
        """Work out the fare for a journey completed at `when`."""
        ...


class BaseFareCalculator(ABC):
    """Abstract base class for capped fare calculators."""

    @abstractmethod
    def base_fare(self, start: Station, end: Station) -> Decimal:
        """Uncapped fare between two stations."""
        pass

    @abstractmethod
    def caps(self, start: Station, end: Station) -> Tuple[Decimal, Decimal]:
        """(day cap, week cap) that apply between two stations."""
        pass

    def calculate_breakdown(self, start: Station, end: Station, when: datetime,
                            history: Iterable[Journey]) -> FareBreakdown:
        """
        Apply the day cap, then the week cap to the already day-capped fare.
        Both periods are taken from the completion time `when`.
        """
        history = list(history)
        fare = self.base_fare(start, end)
        day_cap, week_cap = self.caps(start, end)

        spent_today = sum_cost_on_day(history, when.date())
        spent_this_week = sum_cost_in_week(history, *week_of(when))

        capped = limit_cost_to_max_amount(fare, day_cap, spent_today)
        capped = limit_cost_to_max_amount(capped, week_cap, spent_this_week)

        if capped != fare:
            logger.debug(
                "Fare %s -> %s capped (today %s/%s, week %s/%s)",
                start.name, end.name, spent_today, day_cap, spent_this_week, week_cap,
            )

        return FareBreakdown(
            base_fare=fare,
            day_cap=day_cap,
            week_cap=week_cap,
            spent_today=spent_today,
            spent_this_week=spent_this_week,
            fare=capped,
        )

    def calculate_fare(self, start: Station, end: Station, when: datetime,
                       history: Iterable[Journey]) -> Decimal:
        return self.calculate_breakdown(start, end, when, history).fare


class ZoneCappedFareCalculator(BaseFareCalculator):
    """
    Charges at the dearer zone's tariff.
    Travelling into or out of a pricier zone costs the pricier rate in
    either direction, and the pricier zone's caps apply.
    """

    def base_fare(self, start: Station, end: Station) -> Decimal:
        return cost_per_single_journey(start, end)

    def caps(self, start: Station, end: Station) -> Tuple[Decimal, Decimal]:
        return cost_per_day_limit(start, end), cost_per_week_limit(start, end)


# Singleton instance for default calculator
_default_calculator: Optional[FareCalculatorInterface] = None


def get_fare_calculator() -> FareCalculatorInterface:
    """
    Get the default fare calculator instance.

    Returns:
        Fare calculator instance implementing FareCalculatorInterface
    """
    global _default_calculator
    if _default_calculator is None:
        _default_calculator = ZoneCappedFareCalculator()
    return _default_calculator
