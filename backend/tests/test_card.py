"""Unit tests for the card journey state machine."""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from clamcard import Card, Clock, FixedClock, Idle, InProgress, Journey, Station, SystemClock, Zone
from clamcard.exceptions import (
    CardError,
    InvalidArgumentError,
    JourneyConflictError,
    NoJourneyInProgressError,
)

D = Decimal


def make_zone(name, single, day, week):
    return Zone(
        name=name,
        cost_per_single_journey=D(single),
        cost_per_day_limit=D(day),
        cost_per_week_limit=D(week),
    )


ZONE_A = make_zone("A", "2.50", "7.00", "40.00")
ZONE_B = make_zone("B", "3.00", "8.00", "47.00")

ASTERISK = Station(name="Asterisk", zone=ZONE_A)
ALDGATE = Station(name="Aldgate", zone=ZONE_A)
BISON = Station(name="Bison", zone=ZONE_B)

MONDAY = datetime(2024, 1, 1, 8, 0)


def travel(card, start, end):
    card.start_journey(start)
    return card.end_journey(end)


class TestConstruction:
    """Test building a card."""

    def test_requires_clock(self):
        with pytest.raises(InvalidArgumentError):
            Card(None, [])

    def test_requires_history(self):
        with pytest.raises(InvalidArgumentError):
            Card(FixedClock(MONDAY), None)

    def test_invalid_argument_is_value_error(self):
        """Test callers catching ValueError also catch missing arguments."""
        with pytest.raises(ValueError):
            Card(None, [])

    def test_starts_idle(self):
        card = Card(FixedClock(MONDAY), [])
        assert card.state == Idle()
        assert card.current_journey_start_from is None
        assert card.is_journey_in_progress is False
        assert card.journey_history == ()

    def test_history_copied_in(self):
        """Test the caller's list is not aliased in either direction."""
        earlier = Journey(date=MONDAY, from_station=ASTERISK, to_station=BISON, cost=D("3.00"))
        supplied = [earlier]
        card = Card(FixedClock(MONDAY + timedelta(hours=1)), supplied)

        supplied.append(earlier)
        assert len(card.journey_history) == 1

        travel(card, ASTERISK, ALDGATE)
        assert len(supplied) == 2
        assert len(card.journey_history) == 2

    def test_accepts_any_iterable_history(self):
        earlier = Journey(date=MONDAY, from_station=ASTERISK, to_station=BISON, cost=D("3.00"))
        card = Card(FixedClock(MONDAY), (j for j in [earlier]))
        assert card.journey_history == (earlier,)


class TestStartJourney:
    """Test tapping in."""

    def setup_method(self):
        """Setup test fixtures."""
        self.card = Card(FixedClock(MONDAY), [])

    def test_start_sets_current_station(self):
        result = self.card.start_journey(ASTERISK)

        assert result is None
        assert self.card.current_journey_start_from == ASTERISK
        assert self.card.state == InProgress(ASTERISK)
        assert self.card.is_journey_in_progress is True

    def test_start_requires_station(self):
        with pytest.raises(InvalidArgumentError):
            self.card.start_journey(None)
        assert self.card.state == Idle()

    def test_start_while_in_progress_conflicts(self):
        """Test a second tap-in fails and leaves the card untouched."""
        self.card.start_journey(ASTERISK)

        with pytest.raises(JourneyConflictError):
            self.card.start_journey(BISON)

        assert self.card.current_journey_start_from == ASTERISK
        assert self.card.journey_history == ()

    def test_start_with_none_while_in_progress_is_invalid_argument(self):
        self.card.start_journey(ASTERISK)
        with pytest.raises(InvalidArgumentError):
            self.card.start_journey(None)
        assert self.card.current_journey_start_from == ASTERISK


class TestEndJourney:
    """Test tapping out."""

    def setup_method(self):
        """Setup test fixtures."""
        self.clock = FixedClock(MONDAY)
        self.card = Card(self.clock, [])

    def test_end_records_journey(self):
        self.card.start_journey(ASTERISK)
        journey = self.card.end_journey(BISON)

        assert journey.from_station == ASTERISK
        assert journey.to_station == BISON
        assert journey.date == MONDAY
        assert self.card.journey_history == (journey,)
        assert self.card.state == Idle()

    def test_end_without_journey_fails(self):
        with pytest.raises(NoJourneyInProgressError):
            self.card.end_journey(BISON)
        assert self.card.journey_history == ()

    def test_end_requires_station(self):
        self.card.start_journey(ASTERISK)
        with pytest.raises(InvalidArgumentError):
            self.card.end_journey(None)
        assert self.card.current_journey_start_from == ASTERISK

    def test_end_at_start_station_cancels(self):
        """Test tapping out where the journey began charges nothing."""
        self.card.start_journey(ASTERISK)
        result = self.card.end_journey(ASTERISK)

        assert result is None
        assert self.card.journey_history == ()
        assert self.card.current_journey_start_from is None

    def test_cancel_by_equal_station_value(self):
        """Test an equal station object loaded separately still cancels."""
        self.card.start_journey(ASTERISK)
        same = Station(name="Asterisk", zone=make_zone("A", "2.50", "7.00", "40.00"))

        assert self.card.end_journey(same) is None
        assert self.card.journey_history == ()

    def test_cancel_after_tariff_change(self):
        """Test the same station with new zone tariffs still cancels."""
        self.card.start_journey(ASTERISK)
        repriced = Station(name="Asterisk", zone=make_zone("A", "2.00", "6.00", "30.00"))

        assert self.card.end_journey(repriced) is None
        assert self.card.journey_history == ()
        assert self.card.state == Idle()

    def test_cancelled_journey_does_not_count_towards_caps(self):
        self.card.start_journey(ASTERISK)
        self.card.end_journey(ASTERISK)

        journey = travel(self.card, ASTERISK, ALDGATE)
        assert journey.cost == D("2.50")

    def test_journey_errors_share_a_base(self):
        with pytest.raises(CardError):
            self.card.end_journey(BISON)

    def test_card_reusable_after_many_journeys(self):
        for _ in range(5):
            travel(self.card, ASTERISK, ALDGATE)
        assert len(self.card.journey_history) == 5
        assert self.card.state == Idle()


class TestFares:
    """Test fares charged through the card."""

    def test_single_journey_fare_is_dearer_zone(self):
        card = Card(FixedClock(MONDAY), [])
        assert travel(card, ASTERISK, ALDGATE).cost == D("2.50")
        assert travel(card, ASTERISK, BISON).cost == D("3.00")

    def test_cross_zone_charged_at_higher_rate_both_ways(self):
        zone_x = make_zone("X", "2", "100", "1000")
        zone_y = make_zone("Y", "5", "100", "1000")
        x_station = Station(name="Xenon", zone=zone_x)
        y_station = Station(name="Yarrow", zone=zone_y)
        card = Card(FixedClock(MONDAY), [])

        assert travel(card, x_station, y_station).cost == D("5")
        assert travel(card, y_station, x_station).cost == D("5")

    def test_day_cap(self):
        """Test 3, 3, 3, 1 then 0 against a day cap of 10."""
        zone = make_zone("C", "3", "10", "100")
        one = Station(name="One", zone=zone)
        two = Station(name="Two", zone=zone)
        clock = FixedClock(MONDAY)
        card = Card(clock, [])

        charged = []
        for _ in range(5):
            charged.append(travel(card, one, two).cost)
            clock.advance(timedelta(minutes=30))

        assert charged == [D("3"), D("3"), D("3"), D("1"), D("0")]

    def test_day_cap_resets_next_day(self):
        zone = make_zone("C", "3", "10", "100")
        one = Station(name="One", zone=zone)
        two = Station(name="Two", zone=zone)
        clock = FixedClock(MONDAY)
        card = Card(clock, [])

        for _ in range(4):
            travel(card, one, two)
        clock.advance(timedelta(days=1))

        assert travel(card, one, two).cost == D("3")

    def test_week_cap(self):
        """Test the week cap stops charges despite day cap headroom."""
        zone = make_zone("W", "3", "100", "10")
        one = Station(name="One", zone=zone)
        two = Station(name="Two", zone=zone)
        clock = FixedClock(MONDAY)
        card = Card(clock, [])

        charged = []
        for _ in range(6):
            charged.append(travel(card, one, two).cost)
            clock.advance(timedelta(days=1))

        assert charged == [D("3"), D("3"), D("3"), D("1"), D("0"), D("0")]
        assert sum(charged) == D("10")

    def test_week_cap_resets_next_iso_week(self):
        zone = make_zone("W", "3", "100", "10")
        one = Station(name="One", zone=zone)
        two = Station(name="Two", zone=zone)
        sunday = datetime(2024, 1, 7, 20, 0)
        clock = FixedClock(sunday)
        card = Card(clock, [])

        for _ in range(4):
            travel(card, one, two)
        assert travel(card, one, two).cost == D("0")

        clock.set(datetime(2024, 1, 8, 7, 0))
        assert travel(card, one, two).cost == D("3")

    def test_caps_use_completion_time(self):
        """Test a journey finishing after midnight counts on the new day."""
        zone = make_zone("C", "3", "10", "100")
        one = Station(name="One", zone=zone)
        two = Station(name="Two", zone=zone)
        clock = FixedClock(datetime(2024, 1, 1, 23, 0))
        card = Card(clock, [])

        for _ in range(4):
            travel(card, one, two)

        card.start_journey(one)
        clock.set(datetime(2024, 1, 2, 0, 15))
        journey = card.end_journey(two)

        assert journey.cost == D("3")
        assert journey.date == datetime(2024, 1, 2, 0, 15)

    def test_supplied_history_counts_towards_caps(self):
        earlier = [
            Journey(date=MONDAY, from_station=ASTERISK, to_station=ALDGATE, cost=D("2.50")),
            Journey(date=MONDAY, from_station=ALDGATE, to_station=ASTERISK, cost=D("2.50")),
        ]
        card = Card(FixedClock(MONDAY + timedelta(hours=2)), earlier)

        assert travel(card, ASTERISK, ALDGATE).cost == D("2.00")

    def test_history_already_over_cap_charges_zero(self):
        """Test an exceeded cap never yields a negative charge."""
        earlier = [
            Journey(date=MONDAY, from_station=ASTERISK, to_station=ALDGATE, cost=D("9.00")),
        ]
        card = Card(FixedClock(MONDAY + timedelta(hours=2)), earlier)

        assert travel(card, ASTERISK, ALDGATE).cost == D("0")


class TestHistoryOrdering:
    """Test history keeps completion order."""

    def test_order_follows_calls_not_dates(self):
        clock = FixedClock(datetime(2024, 1, 5, 8, 0))
        card = Card(clock, [])

        first = travel(card, ASTERISK, ALDGATE)
        clock.set(datetime(2024, 1, 3, 8, 0))
        second = travel(card, ALDGATE, BISON)
        clock.set(datetime(2024, 1, 4, 8, 0))
        third = travel(card, BISON, ASTERISK)

        assert card.journey_history == (first, second, third)

    def test_history_view_is_read_only(self):
        card = Card(FixedClock(MONDAY), [])
        travel(card, ASTERISK, ALDGATE)

        view = card.journey_history
        assert isinstance(view, tuple)
        with pytest.raises(AttributeError):
            view.append(view[0])
        assert len(card.journey_history) == 1


class TestClocks:
    """Test the time sources."""

    def test_clocks_implement_protocol(self):
        assert isinstance(SystemClock(), Clock)
        assert isinstance(FixedClock(MONDAY), Clock)

    def test_fixed_clock_moves_only_when_told(self):
        clock = FixedClock(MONDAY)
        assert clock.now() == MONDAY
        assert clock.advance(timedelta(hours=2)) == MONDAY + timedelta(hours=2)
        clock.set(datetime(2024, 2, 1, 9, 0))
        assert clock.now() == datetime(2024, 2, 1, 9, 0)

    def test_system_clock_returns_current_time(self):
        before = datetime.now()
        assert before <= SystemClock().now() <= datetime.now()
