from typing import List, Optional, Tuple
from datetime import datetime, date, time, timedelta
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload
import logging
import re

from bus_booking.config import settings
from bus_booking.exceptions import Conflict, InvalidRequest, NotFound, Unprocessable
from bus_booking.models import Bus, TravelSchedule
from bus_booking.schedules.schemas import TravelScheduleCreate, TravelScheduleUpdate
from bus_booking.stations.service import StationService

logger = logging.getLogger(__name__)

ISO_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

class ScheduleService:
    """Availability search and schedule lifecycle management"""

    def __init__(self, db: Session):
        self.db = db

    # ----------------------------------------------------------------
    # Availability search
    # ----------------------------------------------------------------
    def search_available(
        self,
        source_code: Optional[str],
        destination_code: Optional[str],
        search_date: Optional[str],
        now: Optional[datetime] = None
    ) -> Tuple[List[TravelSchedule], str]:
        """
        Find schedules between two stations departing on the given date.

        Inputs are validated in a fixed order and the first failure is raised.
        Returns the matching schedules and a message describing the outcome;
        an empty list is a normal result, not an error.
        """

        if not search_date:
            self._reject(InvalidRequest("Date is null or empty.", field="date"))
        if not destination_code:
            self._reject(InvalidRequest("Destination station code is null or empty.", field="destinationCode"))
        if not source_code:
            self._reject(InvalidRequest("Source station code is null or empty.", field="sourceCode"))

        source = StationService.get_station_by_code(self.db, source_code)
        if not source:
            self._reject(NotFound(
                f"Invalid source with station code {source_code}",
                field="sourceCode", station_code=source_code
            ))

        destination = StationService.get_station_by_code(self.db, destination_code)
        if not destination:
            self._reject(NotFound(
                f"Invalid destination with station code {destination_code}",
                field="destinationCode", station_code=destination_code
            ))

        if source_code == destination_code:
            self._reject(InvalidRequest(
                "Source and destination station codes cannot be the same.",
                field="destinationCode"
            ))

        try:
            # fromisoformat also takes week and compact forms on newer interpreters
            if not ISO_DATE.fullmatch(search_date):
                raise ValueError(search_date)
            parsed_date = date.fromisoformat(search_date)
        except ValueError:
            self._reject(InvalidRequest(
                "Invalid date format. The correct format is ISO date format (yyyy-MM-dd)",
                field="date", value=search_date
            ))

        current_time = now or datetime.now()
        earliest_departure = self._search_window_start(parsed_date, current_time)

        schedules = (
            self.db.query(TravelSchedule)
            .options(
                joinedload(TravelSchedule.source),
                joinedload(TravelSchedule.destination),
                joinedload(TravelSchedule.bus)
            )
            .filter(
                TravelSchedule.source_id == source.id,
                TravelSchedule.destination_id == destination.id,
                TravelSchedule.estimated_arrival_time > current_time,
                TravelSchedule.estimated_departure_time >= earliest_departure,
                TravelSchedule.estimated_departure_time < datetime.combine(parsed_date + timedelta(days=1), time.min)
            )
            .order_by(TravelSchedule.estimated_departure_time)
            .all()
        )

        if not schedules:
            message = "No schedule is available for the date you searched for."
            logger.info(f"{message} ({source_code} -> {destination_code} on {parsed_date})")
        else:
            message = f"Available schedules between {source.name} and {destination.name} on {parsed_date.isoformat()}"
            logger.info(message)

        return schedules, message

    def _search_window_start(self, search_date: date, now: datetime) -> datetime:
        """Earliest departure a search on ``search_date`` may return"""

        if search_date < now.date():
            self._reject(Unprocessable(
                "Cannot search for schedules in the past",
                date=search_date.isoformat()
            ))

        if search_date == now.date():
            earliest = now + timedelta(hours=settings.SAME_DAY_LEAD_HOURS)
        else:
            earliest = datetime.combine(search_date, time.min)

        if earliest > now + timedelta(days=settings.MAX_SEARCH_DAYS):
            self._reject(Unprocessable(
                f"Cannot search for schedules more than {settings.MAX_SEARCH_DAYS} days in the future",
                date=search_date.isoformat(), max_days=settings.MAX_SEARCH_DAYS
            ))

        return earliest

    # ----------------------------------------------------------------
    # Lifecycle
    # ----------------------------------------------------------------
    def get_schedule(self, schedule_id: int) -> Optional[TravelSchedule]:
        """Get schedule by ID"""
        return self.db.query(TravelSchedule).filter(TravelSchedule.id == schedule_id).first()

    def get_schedules_by_source(self, source_id: int) -> List[TravelSchedule]:
        """All schedules departing from a station, earliest first"""
        return (
            self.db.query(TravelSchedule)
            .filter(TravelSchedule.source_id == source_id)
            .order_by(TravelSchedule.estimated_departure_time)
            .all()
        )

    def create_schedule(self, data: TravelScheduleCreate) -> TravelSchedule:
        """Create a schedule with an initial number of booked seats"""

        logger.info(
            f"Creating travel schedule: source={data.source_id} destination={data.destination_id} "
            f"bus={data.bus_id} departure={data.estimated_departure_time}"
        )

        if not StationService.get_station_by_id(self.db, data.source_id):
            self._reject(NotFound(f"Station with id {data.source_id} not found", field="source_id"))
        if not StationService.get_station_by_id(self.db, data.destination_id):
            self._reject(NotFound(f"Station with id {data.destination_id} not found", field="destination_id"))
        if data.source_id == data.destination_id:
            self._reject(InvalidRequest("Source and destination stations cannot be the same", field="destination_id"))
        if not self._get_bus(data.bus_id):
            self._reject(NotFound(f"Bus with id {data.bus_id} not found", bus_id=data.bus_id))
        self._check_times(data.estimated_departure_time, data.estimated_arrival_time)

        existing = self._find_duplicate(data)
        if existing:
            self._reject(Conflict("Travel schedule already exists", schedule_id=existing.id))

        available_seats = data.total_seat
        requested = data.seat_booked
        if not 0 < requested <= available_seats:
            self._reject(InvalidRequest(
                f"Cannot book {requested} seats, only {available_seats} seats are available",
                requested_seats=requested, available_seats=available_seats
            ))

        schedule = TravelSchedule(
            source_id=data.source_id,
            destination_id=data.destination_id,
            bus_id=data.bus_id,
            estimated_departure_time=data.estimated_departure_time,
            estimated_arrival_time=data.estimated_arrival_time,
            total_seat=data.total_seat,
            seat_booked=requested,
            available_seat=available_seats - requested,
            seat_cost=data.seat_cost
        )

        try:
            self.db.add(schedule)
            self.db.commit()
        except IntegrityError:
            # a concurrent create got past the duplicate check first
            self.db.rollback()
            self._reject(Conflict("Travel schedule already exists"))
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(schedule)
        logger.info(f"Created travel schedule {schedule.id}")
        return schedule

    def update_schedule(self, schedule_id: int, data: TravelScheduleUpdate) -> TravelSchedule:
        """Replace the fields of a schedule, enforcing the bus reuse rule"""

        schedule = (
            self.db.query(TravelSchedule)
            .filter(TravelSchedule.id == schedule_id)
            .with_for_update()
            .first()
        )
        if not schedule:
            self._reject(NotFound(f"Schedule with id {schedule_id} not found", schedule_id=schedule_id))

        try:
            bus_id = schedule.bus_id
            if data.bus_id is not None and data.bus_id != schedule.bus_id:
                if not self._get_bus(data.bus_id):
                    self._reject(NotFound(f"Bus with id {data.bus_id} not found", bus_id=data.bus_id))
                bus_id = data.bus_id

            departure = data.estimated_departure_time or schedule.estimated_departure_time
            arrival = data.estimated_arrival_time or schedule.estimated_arrival_time
            self._check_times(departure, arrival)

            total_seat = data.total_seat if data.total_seat is not None else schedule.total_seat
            seat_booked = data.seat_booked if data.seat_booked is not None else schedule.seat_booked
            if not 0 <= seat_booked <= total_seat:
                self._reject(InvalidRequest(
                    f"Seats booked ({seat_booked}) must be between 0 and total seats ({total_seat})",
                    seat_booked=seat_booked, total_seat=total_seat
                ))

            if self._bus_used_within_turnaround(bus_id, arrival, exclude_schedule_id=schedule.id):
                self._reject(Conflict(
                    f"Bus with id {bus_id} cannot be used within {settings.BUS_TURNAROUND_HOURS} hours",
                    bus_id=bus_id, turnaround_hours=settings.BUS_TURNAROUND_HOURS
                ))

            schedule.bus_id = bus_id
            schedule.estimated_departure_time = departure
            schedule.estimated_arrival_time = arrival
            schedule.total_seat = total_seat
            schedule.seat_booked = seat_booked
            schedule.available_seat = total_seat - seat_booked
            if data.seat_cost is not None:
                schedule.seat_cost = data.seat_cost

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(schedule)
        logger.info(f"Updated travel schedule {schedule.id}")
        return schedule

    def delete_schedule(self, schedule_id: int) -> None:
        """Delete a schedule; existing bookings keep their snapshot"""

        schedule = self.get_schedule(schedule_id)
        if not schedule:
            self._reject(NotFound(f"Schedule with id {schedule_id} not found", schedule_id=schedule_id))

        try:
            self.db.delete(schedule)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Deleted travel schedule {schedule_id}")

    # ----------------------------------------------------------------
    # Helpers
    # ----------------------------------------------------------------
    def _get_bus(self, bus_id: int) -> Optional[Bus]:
        return self.db.query(Bus).filter(Bus.id == bus_id).first()

    def _find_duplicate(self, data: TravelScheduleCreate) -> Optional[TravelSchedule]:
        return self.db.query(TravelSchedule).filter(
            TravelSchedule.source_id == data.source_id,
            TravelSchedule.destination_id == data.destination_id,
            TravelSchedule.bus_id == data.bus_id,
            TravelSchedule.estimated_departure_time == data.estimated_departure_time,
            TravelSchedule.estimated_arrival_time == data.estimated_arrival_time
        ).first()

    def _bus_used_within_turnaround(
        self,
        bus_id: int,
        arrival: datetime,
        exclude_schedule_id: Optional[int] = None
    ) -> bool:
        """True if the bus departs on another schedule within the turnaround after ``arrival``"""

        window_end = arrival + timedelta(hours=settings.BUS_TURNAROUND_HOURS)
        query = self.db.query(TravelSchedule.id).filter(
            TravelSchedule.bus_id == bus_id,
            TravelSchedule.estimated_departure_time >= arrival,
            TravelSchedule.estimated_departure_time < window_end
        )
        if exclude_schedule_id is not None:
            query = query.filter(TravelSchedule.id != exclude_schedule_id)

        return self.db.query(query.exists()).scalar()

    def _check_times(self, departure: datetime, arrival: datetime):
        if arrival <= departure:
            self._reject(InvalidRequest(
                "Estimated arrival time must be after estimated departure time",
                estimated_departure_time=departure.isoformat(),
                estimated_arrival_time=arrival.isoformat()
            ))

    @staticmethod
    def _reject(error):
        logger.warning(error.message)
        raise error
