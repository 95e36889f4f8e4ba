from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import List, Optional, Tuple
import logging

from bus_booking.exceptions import Conflict
from bus_booking.models import Station
from bus_booking.stations.schemas import StationCreate

logger = logging.getLogger(__name__)

class StationService:
    @staticmethod
    def get_station_by_code(db: Session, code: str) -> Optional[Station]:
        """Resolve a station code to a station"""
        return db.query(Station).filter(Station.station_code == code).first()

    @staticmethod
    def get_station_by_id(db: Session, station_id: int) -> Optional[Station]:
        """Get station by ID"""
        return db.query(Station).filter(Station.id == station_id).first()

    @staticmethod
    def get_stations(db: Session, skip: int = 0, limit: int = 50) -> Tuple[List[Station], int]:
        """Get stations ordered by code"""
        query = db.query(Station).order_by(Station.station_code)
        total = query.count()
        stations = query.offset(skip).limit(limit).all()
        return stations, total

    @staticmethod
    def create_station(db: Session, station: StationCreate) -> Station:
        """Register a new station; codes are unique"""
        db_station = Station(station_code=station.station_code, name=station.name)
        try:
            db.add(db_station)
            db.commit()
            db.refresh(db_station)
        except IntegrityError:
            db.rollback()
            logger.warning(f"Station code already registered: {station.station_code}")
            raise Conflict(
                f"Station code {station.station_code} already registered",
                station_code=station.station_code
            )

        logger.info(f"Created station {db_station.station_code} ({db_station.name})")
        return db_station
