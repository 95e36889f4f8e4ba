"""
Booking Module

Seat booking on travel schedules.

Key Components:
- booking_service.py: Seat availability check, atomic seat counter update and
  booking persistence
- fare_service.py: Booking price (seats, 12% tax, priced add-ons)
- router.py: FastAPI endpoints for creating and reading bookings
- schemas.py: Pydantic models for booking requests, add-ons and responses

Add-ons not on the price list are charged nothing and returned to the caller
in ``unpriced_addons``.
"""

from .router import router
from .booking_service import BookingService
from .fare_service import BookingFareService, ADDON_PRICES
from .schemas import (
    BookingRequest, BookingRecord, ExtraAddon, PricedAddon, FareBreakdown
)

__all__ = [
    "router",
    "BookingService",
    "BookingFareService",
    "ADDON_PRICES",
    "BookingRequest",
    "BookingRecord",
    "ExtraAddon",
    "PricedAddon",
    "FareBreakdown"
]
