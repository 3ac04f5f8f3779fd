"""Database models and setup for the station catalog and journey history."""

import logging
import os
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, create_engine
from sqlalchemy.orm import Session, declarative_base, joinedload, relationship, sessionmaker

from clamcard.exceptions import StationNotFoundError
from clamcard.models import Journey, Station, Zone

logger = logging.getLogger(__name__)

Base = declarative_base()

Money = Numeric(10, 2, asdecimal=True)


class ZoneDB(Base):
    """Database model for a zone and its tariffs."""
    __tablename__ = "zones"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    cost_per_single_journey = Column(Money, nullable=False)
    cost_per_day_limit = Column(Money, nullable=False)
    cost_per_week_limit = Column(Money, nullable=False)

    stations = relationship("StationDB", back_populates="zone")

    def to_model(self) -> Zone:
        return Zone(
            name=self.name,
            cost_per_single_journey=self.cost_per_single_journey,
            cost_per_day_limit=self.cost_per_day_limit,
            cost_per_week_limit=self.cost_per_week_limit,
        )

    def __repr__(self):
        return f"<Zone(name={self.name}, single={self.cost_per_single_journey})>"


class StationDB(Base):
    """Database model for a station."""
    __tablename__ = "stations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    zone_id = Column(Integer, ForeignKey("zones.id"), nullable=False)

    zone = relationship("ZoneDB", back_populates="stations")

    def to_model(self) -> Station:
        return Station(name=self.name, zone=self.zone.to_model())

    def __repr__(self):
        return f"<Station(name={self.name}, zone_id={self.zone_id})>"


class JourneyDB(Base):
    """Database model for a completed journey."""
    __tablename__ = "journeys"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(DateTime, nullable=False)
    from_station_id = Column(Integer, ForeignKey("stations.id"), nullable=False)
    to_station_id = Column(Integer, ForeignKey("stations.id"), nullable=False)
    cost = Column(Money, nullable=False)

    from_station = relationship("StationDB", foreign_keys=[from_station_id])
    to_station = relationship("StationDB", foreign_keys=[to_station_id])

    def __repr__(self):
        return f"<Journey(date={self.date}, cost={self.cost})>"


class DatabaseManager:
    """Manager class for catalog and journey history storage."""

    def __init__(self, database_url: Optional[str] = None):
        """Initialize database connection."""
        self.database_url = database_url or os.getenv(
            "DATABASE_URL",
            "sqlite:///./clamcard.db"
        )

        # Create engine with appropriate settings for SQLite
        connect_args = {"check_same_thread": False} if "sqlite" in self.database_url else {}
        self.engine = create_engine(self.database_url, connect_args=connect_args)

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

        Base.metadata.create_all(bind=self.engine)

    def get_session(self) -> Session:
        """Get a new database session."""
        return self.SessionLocal()

    def init_default_catalog(self):
        """Seed the default zones and stations if the catalog is empty."""
        from clamcard.config import DEFAULT_STATIONS, default_zones

        session = self.get_session()
        try:
            if session.query(ZoneDB).count() > 0:
                return

            for zone in default_zones():
                zone_row = ZoneDB(
                    name=zone.name,
                    cost_per_single_journey=zone.cost_per_single_journey,
                    cost_per_day_limit=zone.cost_per_day_limit,
                    cost_per_week_limit=zone.cost_per_week_limit,
                )
                session.add(zone_row)
                for station_name in DEFAULT_STATIONS.get(zone.name, []):
                    session.add(StationDB(name=station_name, zone=zone_row))
            session.commit()
            logger.info("Initialized default catalog with %d zones", len(DEFAULT_STATIONS))
        finally:
            session.close()

    def get_zones(self) -> List[Zone]:
        """Retrieve all zones ordered by name."""
        session = self.get_session()
        try:
            return [row.to_model() for row in session.query(ZoneDB).order_by(ZoneDB.name).all()]
        finally:
            session.close()

    def get_zone(self, name: str) -> Optional[Zone]:
        session = self.get_session()
        try:
            row = session.query(ZoneDB).filter_by(name=name).first()
            return row.to_model() if row else None
        finally:
            session.close()

    def get_stations(self) -> List[Station]:
        """Retrieve all stations ordered by name."""
        session = self.get_session()
        try:
            rows = (
                session.query(StationDB)
                .options(joinedload(StationDB.zone))
                .order_by(StationDB.name)
                .all()
            )
            return [row.to_model() for row in rows]
        finally:
            session.close()

    def get_station(self, name: str) -> Optional[Station]:
        session = self.get_session()
        try:
            row = (
                session.query(StationDB)
                .options(joinedload(StationDB.zone))
                .filter_by(name=name)
                .first()
            )
            return row.to_model() if row else None
        finally:
            session.close()

    def add_zone(self, name: str, cost_per_single_journey: Decimal,
                 cost_per_day_limit: Decimal, cost_per_week_limit: Decimal) -> Zone:
        """
        Add a new zone.

        Raises:
            ValueError: If the zone already exists
        """
        zone = Zone(
            name=name,
            cost_per_single_journey=cost_per_single_journey,
            cost_per_day_limit=cost_per_day_limit,
            cost_per_week_limit=cost_per_week_limit,
        )
        session = self.get_session()
        try:
            if session.query(ZoneDB).filter_by(name=zone.name).first():
                raise ValueError(f"Zone {zone.name} already exists")
            session.add(ZoneDB(
                name=zone.name,
                cost_per_single_journey=zone.cost_per_single_journey,
                cost_per_day_limit=zone.cost_per_day_limit,
                cost_per_week_limit=zone.cost_per_week_limit,
            ))
            session.commit()
            logger.info("Added zone %s", zone.name)
            return zone
        finally:
            session.close()

    def add_station(self, name: str, zone_name: str) -> Station:
        """
        Add a station to an existing zone.

        Raises:
            ValueError: If the station exists or the zone does not
        """
        session = self.get_session()
        try:
            zone_row = session.query(ZoneDB).filter_by(name=zone_name).first()
            if zone_row is None:
                raise ValueError(f"Zone {zone_name} does not exist")
            if session.query(StationDB).filter_by(name=name).first():
                raise ValueError(f"Station {name} already exists")

            row = StationDB(name=name, zone=zone_row)
            session.add(row)
            session.commit()
            logger.info("Added station %s in zone %s", name, zone_name)
            return row.to_model()
        finally:
            session.close()

    def update_zone_tariffs(self, name: str, cost_per_single_journey: Decimal,
                            cost_per_day_limit: Decimal, cost_per_week_limit: Decimal) -> Zone:
        """
        Change the tariffs of an existing zone.

        Raises:
            ValueError: If the zone does not exist
        """
        session = self.get_session()
        try:
            row = session.query(ZoneDB).filter_by(name=name).first()
            if row is None:
                raise ValueError(f"Zone {name} does not exist")

            row.cost_per_single_journey = cost_per_single_journey
            row.cost_per_day_limit = cost_per_day_limit
            row.cost_per_week_limit = cost_per_week_limit
            session.commit()
            return row.to_model()
        finally:
            session.close()

    def load_journey_history(self) -> List[Journey]:
        """All stored journeys in the order they were saved."""
        session = self.get_session()
        try:
            rows = (
                session.query(JourneyDB)
                .options(
                    joinedload(JourneyDB.from_station).joinedload(StationDB.zone),
                    joinedload(JourneyDB.to_station).joinedload(StationDB.zone),
                )
                .order_by(JourneyDB.id)
                .all()
            )
            return [
                Journey(
                    date=row.date,
                    from_station=row.from_station.to_model(),
                    to_station=row.to_station.to_model(),
                    cost=row.cost,
                )
                for row in rows
            ]
        finally:
            session.close()

    def save_journey(self, journey: Journey):
        """
        Append a completed journey to the stored history.

        Raises:
            StationNotFoundError: If either station is not in the catalog
        """
        session = self.get_session()
        try:
            from_row = session.query(StationDB).filter_by(name=journey.from_station.name).first()
            if from_row is None:
                raise StationNotFoundError(journey.from_station.name)
            to_row = session.query(StationDB).filter_by(name=journey.to_station.name).first()
            if to_row is None:
                raise StationNotFoundError(journey.to_station.name)

            session.add(JourneyDB(
                date=journey.date,
                from_station_id=from_row.id,
                to_station_id=to_row.id,
                cost=journey.cost,
            ))
            session.commit()
        finally:
            session.close()

    def clear_journey_history(self) -> int:
        """Delete all stored journeys, returning how many were removed."""
        session = self.get_session()
        try:
            count = session.query(JourneyDB).delete()
            session.commit()
            return count
        finally:
            session.close()


# Singleton instance
_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    """Get singleton database manager instance."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
        _db_manager.init_default_catalog()
    return _db_manager
