from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from bus_booking.database import get_db
from bus_booking.exceptions import BookingSystemError, to_http_exception
from bus_booking.stations.schemas import Station, StationCreate, StationListResult
from bus_booking.stations.service import StationService

router = APIRouter()

@router.get("/", response_model=StationListResult)
def get_stations(
    skip: int = Query(0, ge=0, description="Number of stations to skip"),
    limit: int = Query(50, ge=1, le=100, description="Number of stations to return"),
    db: Session = Depends(get_db)
):
    """List stations"""
    stations, total = StationService.get_stations(db, skip=skip, limit=limit)

    return StationListResult(
        stations=[Station.model_validate(s) for s in stations],
        total=total,
        page=(skip // limit) + 1,
        per_page=limit
    )

@router.post("/", response_model=Station, status_code=status.HTTP_201_CREATED)
def create_station(station: StationCreate, db: Session = Depends(get_db)):
    """Register a station"""
    try:
        return StationService.create_station(db, station)
    except BookingSystemError as e:
        raise to_http_exception(e)

@router.get("/{station_code}", response_model=Station)
def get_station(station_code: str, db: Session = Depends(get_db)):
    """Get station details by code"""
    station = StationService.get_station_by_code(db, station_code)
    if not station:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Station with code {station_code} not found"
        )
    return station
