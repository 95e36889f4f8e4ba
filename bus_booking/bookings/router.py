from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from bus_booking.database import get_db
from bus_booking.exceptions import BookingSystemError, to_http_exception
from bus_booking.bookings.schemas import BookingRequest, BookingRecord
from bus_booking.bookings.booking_service import BookingService

router = APIRouter()

@router.post("", response_model=BookingRecord, status_code=status.HTTP_201_CREATED)
def create_booking(
    request: BookingRequest,
    db: Session = Depends(get_db)
):
    """Book seats on a travel schedule"""

    booking_service = BookingService(db)

    try:
        return booking_service.book(
            schedule_id=request.schedule_id,
            user_id=request.user_id,
            number_of_seats=request.number_of_seats,
            addons=request.extra_addons
        )
    except BookingSystemError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create booking: {str(e)}"
        )

@router.get("/user/{user_id}", response_model=List[BookingRecord])
def get_user_bookings(
    user_id: int,
    db: Session = Depends(get_db)
):
    """Get all bookings for a user"""

    booking_service = BookingService(db)
    return booking_service.get_user_bookings(user_id)

@router.get("/{booking_id}", response_model=BookingRecord)
def get_booking(
    booking_id: int,
    db: Session = Depends(get_db)
):
    """Get booking details by ID"""

    booking_service = BookingService(db)
    booking = booking_service.get_booking(booking_id)

    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found"
        )

    return booking
