from pydantic import BaseModel, Field, validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from bus_booking.stations.schemas import StationSummary

def _naive(value: Optional[datetime]) -> Optional[datetime]:
    # Always use timezone-naive datetimes for comparison
    if value is not None and value.tzinfo:
        return value.astimezone().replace(tzinfo=None)
    return value

class BusSummary(BaseModel):
    """Bus assigned to a schedule"""
    id: int
    bus_number: str
    operator_name: Optional[str] = None
    capacity: int

    class Config:
        from_attributes = True

# Request Models
class TravelScheduleCreate(BaseModel):
    """Request to create a travel schedule"""
    source_id: int
    destination_id: int
    bus_id: int
    estimated_departure_time: datetime
    estimated_arrival_time: datetime
    total_seat: int = Field(..., gt=0)
    seat_booked: int = 0
    seat_cost: Decimal = Field(..., ge=0)

    @validator("estimated_departure_time", "estimated_arrival_time")
    def strip_timezone(cls, v):
        return _naive(v)

class TravelScheduleUpdate(BaseModel):
    """Replacement fields for an existing schedule; omitted fields are kept"""
    bus_id: Optional[int] = None
    estimated_departure_time: Optional[datetime] = None
    estimated_arrival_time: Optional[datetime] = None
    total_seat: Optional[int] = Field(None, gt=0)
    seat_booked: Optional[int] = None
    seat_cost: Optional[Decimal] = Field(None, ge=0)

    @validator("estimated_departure_time", "estimated_arrival_time")
    def strip_timezone(cls, v):
        return _naive(v)

# Response Models
class TravelSchedule(BaseModel):
    """Travel schedule with its seat inventory"""
    id: int
    source: StationSummary
    destination: StationSummary
    bus: BusSummary
    estimated_departure_time: datetime
    estimated_arrival_time: datetime
    total_seat: int
    seat_booked: int
    available_seat: int
    seat_cost: Decimal

    class Config:
        from_attributes = True

class AvailabilityResponse(BaseModel):
    """Availability search result wrapper"""
    message: str
    schedules: List[TravelSchedule] = []
    error: Optional[str] = None
