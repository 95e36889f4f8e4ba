from sqlalchemy import Column, Integer, BigInteger, String, DateTime, ForeignKey, Numeric, JSON, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from bus_booking.database import Base

# SQLite only autoincrements INTEGER primary keys
PrimaryKey = BigInteger().with_variant(Integer, "sqlite")

# ================================
# Users
# ================================
class User(Base):
    __tablename__ = "users"

    id = Column(PrimaryKey, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    bookings = relationship("Booking", back_populates="user")

# ================================
# Stations & Buses
# ================================
class Station(Base):
    __tablename__ = "stations"

    id = Column(PrimaryKey, primary_key=True, index=True)
    station_code = Column(String(20), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

class Bus(Base):
    __tablename__ = "buses"

    id = Column(PrimaryKey, primary_key=True, index=True)
    bus_number = Column(String(50), unique=True, nullable=False)
    operator_name = Column(String(255))
    capacity = Column(Integer, nullable=False, default=40)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    schedules = relationship("TravelSchedule", back_populates="bus")

# ================================
# Travel Schedules
# ================================
class TravelSchedule(Base):
    __tablename__ = "travel_schedules"

    id = Column(PrimaryKey, primary_key=True, index=True)
    source_id = Column(BigInteger, ForeignKey("stations.id"), nullable=False, index=True)
    destination_id = Column(BigInteger, ForeignKey("stations.id"), nullable=False, index=True)
    bus_id = Column(BigInteger, ForeignKey("buses.id"), nullable=False, index=True)
    estimated_departure_time = Column(DateTime, nullable=False, index=True)
    estimated_arrival_time = Column(DateTime, nullable=False, index=True)
    total_seat = Column(Integer, nullable=False)
    seat_booked = Column(Integer, nullable=False, default=0)
    available_seat = Column(Integer, nullable=False)
    seat_cost = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    source = relationship("Station", foreign_keys=[source_id])
    destination = relationship("Station", foreign_keys=[destination_id])
    bus = relationship("Bus", back_populates="schedules")
    bookings = relationship("Booking", back_populates="schedule")

    __table_args__ = (
        CheckConstraint("seat_booked >= 0", name="check_schedule_seat_booked_non_negative"),
        CheckConstraint("available_seat >= 0", name="check_schedule_available_seat_non_negative"),
        CheckConstraint("seat_booked + available_seat = total_seat", name="check_schedule_seat_inventory"),
        UniqueConstraint(
            "source_id", "destination_id", "bus_id", "estimated_departure_time", "estimated_arrival_time",
            name="uq_schedule_trip"
        ),
    )

# ================================
# Bookings
# ================================
class Booking(Base):
    __tablename__ = "bookings"

    id = Column(PrimaryKey, primary_key=True, index=True)
    user_id = Column(BigInteger, ForeignKey("users.id"), nullable=False, index=True)
    schedule_id = Column(BigInteger, ForeignKey("travel_schedules.id", ondelete="SET NULL"), index=True)
    number_of_seats = Column(Integer, nullable=False)
    seat_cost = Column(Numeric(10, 2), nullable=False)
    tax_amount = Column(Numeric(10, 2), nullable=False, default=0)
    addon_amount = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)
    extra_addons = Column(JSON, default=list)
    schedule_snapshot = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="bookings")
    schedule = relationship("TravelSchedule", back_populates="bookings")

    __table_args__ = (
        CheckConstraint("number_of_seats > 0", name="check_booking_seat_count_positive"),
    )
