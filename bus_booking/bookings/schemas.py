from pydantic import BaseModel, Field, validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from bus_booking.schedules.schemas import TravelSchedule

class ExtraAddon(BaseModel):
    """Optional extra attached to a booking"""
    name: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)

class PricedAddon(ExtraAddon):
    """Add-on line as charged; unit_price is None when the name is not on the price list"""
    unit_price: Optional[Decimal] = None
    line_total: Decimal = Decimal('0')

class FareBreakdown(BaseModel):
    """Price of a booking"""
    seat_cost: Decimal
    number_of_seats: int
    subtotal: Decimal
    tax: Decimal
    addon_cost: Decimal
    total_amount: Decimal
    addons: List[PricedAddon] = []
    unpriced_addons: List[str] = []

# Booking Request Models
class BookingRequest(BaseModel):
    """Request to book seats on a schedule"""
    schedule_id: int
    user_id: int
    number_of_seats: int = Field(..., gt=0)
    extra_addons: List[ExtraAddon] = []

    @validator('extra_addons', pre=True)
    def default_addons(cls, v):
        return v or []

# Booking Response Models
class BookingRecord(BaseModel):
    """Booking as stored, with the schedule as it was when booked"""
    id: int
    user_id: int
    schedule_id: Optional[int] = None
    schedule: TravelSchedule
    number_of_seats: int
    seat_cost: Decimal
    subtotal: Decimal
    tax: Decimal
    addon_cost: Decimal
    total_amount: Decimal
    extra_addons: List[PricedAddon] = []
    unpriced_addons: List[str] = []
    created_at: Optional[datetime] = None
