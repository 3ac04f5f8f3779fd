"""API endpoints for tapping the card and browsing the catalog."""

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException

from clamcard.config import settings
from clamcard.database import get_db_manager
from clamcard.exceptions import InvalidArgumentError, JourneyError, StationNotFoundError
from clamcard.models import (
    CardStateResponse,
    JourneyHistoryResponse,
    JourneyResponse,
    SpendingSummary,
    TapOutResponse,
    TapRequest,
    ZoneTariffUpdate,
)
from clamcard.services.card_service import CardService, get_card_service

router = APIRouter(prefix="/api", tags=["Card"])


def get_service() -> CardService:
    """Dependency injection for the card service."""
    return get_card_service()


def _raise_http(error: Exception):
    if isinstance(error, StationNotFoundError):
        raise HTTPException(status_code=404, detail=str(error))
    if isinstance(error, JourneyError):
        raise HTTPException(status_code=409, detail=str(error))
    if isinstance(error, InvalidArgumentError):
        raise HTTPException(status_code=400, detail=str(error))
    raise error


@router.post("/tap-in", response_model=CardStateResponse)
async def tap_in(
    request: TapRequest,
    service: CardService = Depends(get_service)
) -> CardStateResponse:
    """
    Start a journey at the given station.

    Raises:
        HTTPException: 404 for an unknown station, 409 if a journey is open
    """
    try:
        station = service.tap_in(request.station)
    except (StationNotFoundError, JourneyError, InvalidArgumentError) as e:
        _raise_http(e)
    return CardStateResponse(in_progress=True, station=station.name)


@router.post("/tap-out", response_model=TapOutResponse)
async def tap_out(
    request: TapRequest,
    service: CardService = Depends(get_service)
) -> TapOutResponse:
    """
    End the open journey at the given station.
    Tapping out where the journey started cancels it without a charge.

    Raises:
        HTTPException: 404 for an unknown station, 409 if no journey is open
    """
    try:
        journey = service.tap_out(request.station)
    except (StationNotFoundError, JourneyError, InvalidArgumentError) as e:
        _raise_http(e)

    if journey is None:
        return TapOutResponse(cancelled=True)
    return TapOutResponse(journey=JourneyResponse.from_journey(journey))


@router.get("/journeys", response_model=JourneyHistoryResponse)
async def get_journeys(service: CardService = Depends(get_service)) -> JourneyHistoryResponse:
    """Completed journeys in completion order with the total charged."""
    journeys = [JourneyResponse.from_journey(j) for j in service.history()]
    return JourneyHistoryResponse(
        journeys=journeys,
        total_cost=sum((j.cost for j in journeys), Decimal("0")),
        journey_count=len(journeys),
    )


@router.get("/journeys/current", response_model=CardStateResponse)
async def get_current_journey(service: CardService = Depends(get_service)) -> CardStateResponse:
    station = service.current_station()
    if station is None:
        return CardStateResponse(in_progress=False)
    return CardStateResponse(in_progress=True, station=station.name)


@router.get("/spending", response_model=SpendingSummary)
async def get_spending(service: CardService = Depends(get_service)) -> SpendingSummary:
    return service.spending_summary()


@router.get("/stations")
async def get_stations():
    """All stations in the catalog with their zone."""
    stations = settings.get_stations()
    return {
        "stations": [
            {"name": station.name, "zone": station.zone.name}
            for station in stations.values()
        ],
        "total_stations": len(stations),
    }


@router.get("/zones")
async def get_zones():
    """All zones and their tariffs."""
    zones = settings.get_zones()
    return {
        "zones": [zone.model_dump(mode="json") for zone in zones],
        "total_zones": len(zones),
    }


@router.put("/zones/{name}")
async def update_zone_tariffs(name: str, update: ZoneTariffUpdate):
    """
    Change a zone's tariffs.
    Journeys already charged keep their recorded cost.
    """
    db_manager = get_db_manager()
    try:
        zone = db_manager.update_zone_tariffs(
            name,
            update.cost_per_single_journey,
            update.cost_per_day_limit,
            update.cost_per_week_limit,
        )
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    # Clear cache to ensure new tariffs are loaded
    settings.reload_catalog()

    return {
        "zone": zone.model_dump(mode="json"),
        "message": "Zone tariffs updated successfully"
    }


@router.get("/health")
async def health_check():
    """Health check endpoint including database status."""
    db_status = "healthy"
    try:
        db_manager = get_db_manager()
        stations_count = len(db_manager.get_stations())
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"
        stations_count = 0

    return {
        "status": "healthy",
        "service": settings.API_TITLE,
        "datastore_status": db_status,
        "stations_count": stations_count
    }
