"""
Schedules Module

Availability search and lifecycle management for bus travel schedules.

Key Components:
- service.py: Availability search window rules and schedule create/update/delete,
  including the bus turnaround rule and seat inventory checks
- router.py: FastAPI endpoints for availability search and schedule management
- schemas.py: Pydantic models for schedule requests and responses

Rules:
- Searches cannot target past dates or dates more than 30 days ahead
- Same-day searches only return departures at least one hour from now
- A bus cannot depart on another schedule within 24 hours of arriving
- seat_booked + available_seat always equals total_seat
"""

from .router import router
from .service import ScheduleService
from .schemas import (
    TravelSchedule, TravelScheduleCreate, TravelScheduleUpdate,
    AvailabilityResponse, BusSummary
)

__all__ = [
    "router",
    "ScheduleService",
    "TravelSchedule",
    "TravelScheduleCreate",
    "TravelScheduleUpdate",
    "AvailabilityResponse",
    "BusSummary"
]
