from fastapi import APIRouter, Depends, HTTPException, status, Query, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import List, Optional

from bus_booking.database import get_db
from bus_booking.exceptions import BookingSystemError, to_http_exception
from bus_booking.schedules.schemas import (
    AvailabilityResponse, TravelSchedule, TravelScheduleCreate, TravelScheduleUpdate
)
from bus_booking.schedules.service import ScheduleService

router = APIRouter()

@router.get("/availability", response_model=AvailabilityResponse)
def get_available_schedules(
    source_code: Optional[str] = Query(None, alias="sourceCode", description="Source station code"),
    destination_code: Optional[str] = Query(None, alias="destinationCode", description="Destination station code"),
    date: Optional[str] = Query(None, description="Travel date (yyyy-MM-dd)"),
    db: Session = Depends(get_db)
):
    """Search schedules between two stations on a date"""

    schedule_service = ScheduleService(db)

    try:
        schedules, message = schedule_service.search_available(source_code, destination_code, date)
    except BookingSystemError as e:
        response = AvailabilityResponse(message=e.message, schedules=[], error=e.kind)
        return JSONResponse(status_code=e.status_code, content=response.model_dump(mode="json"))

    response = AvailabilityResponse(
        message=message,
        schedules=[TravelSchedule.model_validate(s) for s in schedules]
    )
    return JSONResponse(
        status_code=status.HTTP_200_OK if schedules else status.HTTP_404_NOT_FOUND,
        content=response.model_dump(mode="json", exclude_none=True)
    )

@router.get("", response_model=List[TravelSchedule])
def get_schedules_by_source(
    source_id: int = Query(..., alias="sourceId", description="Source station ID"),
    db: Session = Depends(get_db)
):
    """List schedules departing from a station"""

    schedule_service = ScheduleService(db)
    return schedule_service.get_schedules_by_source(source_id)

@router.post("", response_model=TravelSchedule, status_code=status.HTTP_201_CREATED)
def create_schedule(
    request: TravelScheduleCreate,
    db: Session = Depends(get_db)
):
    """Create a new travel schedule"""

    schedule_service = ScheduleService(db)

    try:
        return schedule_service.create_schedule(request)
    except BookingSystemError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create schedule: {str(e)}"
        )

@router.get("/{schedule_id}", response_model=TravelSchedule)
def get_schedule(
    schedule_id: int,
    db: Session = Depends(get_db)
):
    """Get schedule details by ID"""

    schedule_service = ScheduleService(db)
    schedule = schedule_service.get_schedule(schedule_id)

    if not schedule:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Schedule with id {schedule_id} not found"
        )

    return schedule

@router.put("/{schedule_id}", response_model=TravelSchedule)
def update_schedule(
    schedule_id: int,
    request: TravelScheduleUpdate,
    db: Session = Depends(get_db)
):
    """Update an existing travel schedule"""

    schedule_service = ScheduleService(db)

    try:
        return schedule_service.update_schedule(schedule_id, request)
    except BookingSystemError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update schedule: {str(e)}"
        )

@router.delete("/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_schedule(
    schedule_id: int,
    db: Session = Depends(get_db)
):
    """Delete a travel schedule"""

    schedule_service = ScheduleService(db)

    try:
        schedule_service.delete_schedule(schedule_id)
    except BookingSystemError as e:
        raise to_http_exception(e)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
