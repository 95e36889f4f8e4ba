from typing import List, Optional
from sqlalchemy import update
from sqlalchemy.orm import Session
import logging

from bus_booking.exceptions import InsufficientSeats, ScheduleNotFound, UserNotFound
from bus_booking.models import Booking, TravelSchedule, User
from bus_booking.bookings.schemas import BookingRecord, ExtraAddon
from bus_booking.bookings.fare_service import BookingFareService
from bus_booking.schedules.schemas import TravelSchedule as TravelScheduleSchema

logger = logging.getLogger(__name__)

class BookingService:
    """Service for booking seats on travel schedules"""

    def __init__(self, db: Session, fare_service: Optional[BookingFareService] = None):
        self.db = db
        self.fare_service = fare_service or BookingFareService()

    def book(
        self,
        schedule_id: int,
        user_id: int,
        number_of_seats: int,
        addons: Optional[List[ExtraAddon]] = None
    ) -> BookingRecord:
        """
        Book seats on a schedule.

        The seat counters are moved with a single conditional UPDATE that only
        matches while enough seats remain, so two bookings racing on the same
        schedule cannot both take the last seats. The counter update and the
        booking insert commit together or not at all.
        """

        logger.info(f"Creating booking: schedule={schedule_id} user={user_id} seats={number_of_seats}")
        addons = addons or []

        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            logger.warning(f"User not found for id: {user_id}")
            raise UserNotFound(f"User not found for id: {user_id}", user_id=user_id)

        schedule = self.db.query(TravelSchedule).filter(TravelSchedule.id == schedule_id).first()
        if not schedule:
            logger.warning(f"Travel schedule not found for id: {schedule_id}")
            raise ScheduleNotFound(f"Travel schedule not found for id: {schedule_id}", schedule_id=schedule_id)

        available_seats = schedule.total_seat - schedule.seat_booked
        if number_of_seats > available_seats:
            self._insufficient(schedule_id, number_of_seats, available_seats)

        fare = self.fare_service.calculate(number_of_seats, schedule.seat_cost, addons)

        try:
            result = self.db.execute(
                update(TravelSchedule)
                .where(
                    TravelSchedule.id == schedule_id,
                    TravelSchedule.available_seat >= number_of_seats
                )
                .values(
                    seat_booked=TravelSchedule.seat_booked + number_of_seats,
                    available_seat=TravelSchedule.available_seat - number_of_seats
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                # Another booking took the seats after they were read
                self.db.rollback()
                self.db.refresh(schedule)
                self._insufficient(schedule_id, number_of_seats, schedule.available_seat)

            self.db.refresh(schedule)
            snapshot = TravelScheduleSchema.model_validate(schedule).model_dump(mode="json")

            booking = Booking(
                user_id=user.id,
                schedule_id=schedule.id,
                number_of_seats=number_of_seats,
                seat_cost=fare.seat_cost,
                tax_amount=fare.tax,
                addon_amount=fare.addon_cost,
                total_amount=fare.total_amount,
                extra_addons=[a.model_dump(mode="json") for a in fare.addons],
                schedule_snapshot=snapshot
            )
            self.db.add(booking)
            self.db.commit()
        except InsufficientSeats:
            raise
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(booking)
        logger.info(f"Booking {booking.id} created, total amount {booking.total_amount}")
        return self.to_record(booking)

    def get_booking(self, booking_id: int) -> Optional[BookingRecord]:
        """Get booking by ID"""
        booking = self.db.query(Booking).filter(Booking.id == booking_id).first()
        return self.to_record(booking) if booking else None

    def get_user_bookings(self, user_id: int) -> List[BookingRecord]:
        """Get all bookings for a user, newest first"""
        bookings = (
            self.db.query(Booking)
            .filter(Booking.user_id == user_id)
            .order_by(Booking.id.desc())
            .all()
        )
        return [self.to_record(b) for b in bookings]

    @staticmethod
    def to_record(booking: Booking) -> BookingRecord:
        """Project a stored booking into its response shape"""
        addons = booking.extra_addons or []
        subtotal = booking.number_of_seats * booking.seat_cost

        return BookingRecord(
            id=booking.id,
            user_id=booking.user_id,
            schedule_id=booking.schedule_id,
            schedule=booking.schedule_snapshot,
            number_of_seats=booking.number_of_seats,
            seat_cost=booking.seat_cost,
            subtotal=subtotal,
            tax=booking.tax_amount,
            addon_cost=booking.addon_amount,
            total_amount=booking.total_amount,
            extra_addons=addons,
            unpriced_addons=[a["name"] for a in addons if a.get("unit_price") is None],
            created_at=booking.created_at
        )

    @staticmethod
    def _insufficient(schedule_id: int, requested: int, available: int):
        logger.warning(f"Cannot book {requested} seats, only {available} seats are available")
        raise InsufficientSeats(
            "Insufficient seats available",
            schedule_id=schedule_id, requested_seats=requested, available_seats=available
        )
