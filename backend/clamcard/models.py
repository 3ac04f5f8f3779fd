"""Models for the ClamCard fare system."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Zone(BaseModel):
    """Tariff-bearing grouping of stations."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Zone name, e.g. 'A'")
    cost_per_single_journey: Decimal = Field(..., ge=0, description="Cost of one journey")
    cost_per_day_limit: Decimal = Field(..., ge=0, description="Maximum charged per calendar day")
    cost_per_week_limit: Decimal = Field(..., ge=0, description="Maximum charged per ISO week")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Zone name must not be blank")
        return v.strip()


class Station(BaseModel):
    """A station and the zone it belongs to."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Station name")
    zone: Zone

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Station name must not be blank")
        return v.strip()

    # Identity is the catalog name; zone tariffs can change between taps.
    def __eq__(self, other):
        if not isinstance(other, Station):
            return NotImplemented
        return self.name == other.name

    def __hash__(self):
        return hash(self.name)


class Journey(BaseModel):
    """A completed journey and the amount charged for it."""
    model_config = ConfigDict(frozen=True)

    date: datetime = Field(..., description="When the journey was completed")
    from_station: Station
    to_station: Station
    cost: Decimal = Field(..., description="Amount charged")


class FareBreakdown(BaseModel):
    """How a journey's fare was reached."""

    base_fare: Decimal = Field(..., ge=0)
    day_cap: Decimal = Field(..., ge=0)
    week_cap: Decimal = Field(..., ge=0)
    spent_today: Decimal
    spent_this_week: Decimal
    fare: Decimal = Field(..., ge=0)

    @property
    def capped(self) -> bool:
        return self.fare < self.base_fare


# API request/response models

class TapRequest(BaseModel):
    """Request body for tapping in or out."""
    station: str = Field(..., min_length=1, description="Station name")


class JourneyResponse(BaseModel):
    """A journey as returned by the API."""
    date: datetime
    from_station: str
    to_station: str
    from_zone: str
    to_zone: str
    cost: Decimal

    @classmethod
    def from_journey(cls, journey: Journey) -> "JourneyResponse":
        return cls(
            date=journey.date,
            from_station=journey.from_station.name,
            to_station=journey.to_station.name,
            from_zone=journey.from_station.zone.name,
            to_zone=journey.to_station.zone.name,
            cost=journey.cost,
        )


class TapOutResponse(BaseModel):
    """Result of tapping out: a charged journey, or a cancellation."""
    cancelled: bool = False
    journey: Optional[JourneyResponse] = None


class CardStateResponse(BaseModel):
    """Whether a journey is open and where it started."""
    in_progress: bool
    station: Optional[str] = None


class JourneyHistoryResponse(BaseModel):
    """Response model for the journey history."""
    journeys: List[JourneyResponse] = Field(
        ...,
        description="Completed journeys in completion order"
    )
    total_cost: Decimal = Field(..., description="Total charged across all journeys")
    journey_count: int = Field(..., description="Number of journeys")


class SpendingSummary(BaseModel):
    """Amounts charged so far in the current day and ISO week."""
    as_of: datetime
    spent_today: Decimal
    spent_this_week: Decimal
    iso_year: int
    iso_week: int


class ZoneTariffUpdate(BaseModel):
    """Request body for changing a zone's tariffs."""
    cost_per_single_journey: Decimal = Field(..., ge=0)
    cost_per_day_limit: Decimal = Field(..., ge=0)
    cost_per_week_limit: Decimal = Field(..., ge=0)
