"""Configuration for the ClamCard system."""

import logging
import os
from decimal import Decimal
from typing import Dict, List, Optional

from dotenv import load_dotenv

from clamcard.models import Station, Zone

load_dotenv()

logger = logging.getLogger(__name__)


def default_zones() -> List[Zone]:
    """Tariffs used to seed a new database."""
    return [
        Zone(
            name="A",
            cost_per_single_journey=Decimal("2.50"),
            cost_per_day_limit=Decimal("7.00"),
            cost_per_week_limit=Decimal("40.00"),
        ),
        Zone(
            name="B",
            cost_per_single_journey=Decimal("3.00"),
            cost_per_day_limit=Decimal("8.00"),
            cost_per_week_limit=Decimal("47.00"),
        ),
    ]


DEFAULT_STATIONS = {
    "A": ["Asterisk", "Aldgate", "Angel", "Antelope"],
    "B": ["Bison", "Bugel", "Balham", "Bullhead", "Barbican"],
}


def default_stations() -> List[Station]:
    zones = {zone.name: zone for zone in default_zones()}
    return [
        Station(name=name, zone=zones[zone_name])
        for zone_name, names in DEFAULT_STATIONS.items()
        for name in names
    ]


class Settings:
    """Application settings."""

    # API Settings
    API_TITLE = "ClamCard"
    API_VERSION = "1.0.0"
    API_DESCRIPTION = (
        "Contactless fare card with daily and weekly fare capping"
    )

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # CORS Settings
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv(
            "CORS_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000,http://localhost:8000,http://127.0.0.1:8000",
        ).split(",")
        if origin.strip()
    ]

    # Cached catalog (loaded from database)
    _zones_cache: Optional[List[Zone]] = None
    _stations_cache: Optional[Dict[str, Station]] = None

    @classmethod
    def get_zones(cls) -> List[Zone]:
        """
        Get zones from database (with caching).
        Falls back to the default tariffs if the database is unavailable.
        """
        if cls._zones_cache is None:
            try:
                from clamcard.database import get_db_manager

                cls._zones_cache = get_db_manager().get_zones()
            except Exception as e:
                logger.warning("Could not load zones from database: %s", e)
                cls._zones_cache = default_zones()
        return cls._zones_cache

    @classmethod
    def get_stations(cls) -> Dict[str, Station]:
        """Get stations keyed by name (with caching)."""
        if cls._stations_cache is None:
            try:
                from clamcard.database import get_db_manager

                stations = get_db_manager().get_stations()
            except Exception as e:
                logger.warning("Could not load stations from database: %s", e)
                stations = default_stations()
            cls._stations_cache = {station.name: station for station in stations}
        return cls._stations_cache

    @classmethod
    def reload_catalog(cls):
        """Force reload of zones and stations from database."""
        cls._zones_cache = None
        cls._stations_cache = None
        cls.get_zones()
        cls.get_stations()


settings = Settings()
