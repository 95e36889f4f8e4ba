#!/usr/bin/env python3

from datetime import datetime, time, timedelta
from decimal import Decimal

from bus_booking.database import SessionLocal, init_db
from bus_booking.models import Booking, Bus, Station, TravelSchedule, User

def create_seed_data():
    init_db()
    db = SessionLocal()

    try:
        print("Creating seed data for Bus Booking System...")

        # Clear existing data (in reverse dependency order)
        print("Clearing existing data...")
        db.query(Booking).delete()
        db.query(TravelSchedule).delete()
        db.query(Bus).delete()
        db.query(Station).delete()
        db.query(User).delete()

        # 1. Create Stations
        print("Creating stations...")
        stations = {
            "NYC": Station(station_code="NYC", name="New York Port Authority"),
            "BOS": Station(station_code="BOS", name="Boston South Station"),
            "PHL": Station(station_code="PHL", name="Philadelphia Greyhound Terminal"),
            "WAS": Station(station_code="WAS", name="Washington Union Station"),
        }
        db.add_all(stations.values())
        db.flush()

        # 2. Create Buses
        print("Creating buses...")
        buses = [
            Bus(bus_number="NE-101", operator_name="Northeast Coach", capacity=40),
            Bus(bus_number="NE-102", operator_name="Northeast Coach", capacity=40),
            Bus(bus_number="CP-201", operator_name="Capital Express", capacity=52),
            Bus(bus_number="CP-202", operator_name="Capital Express", capacity=52),
        ]
        db.add_all(buses)
        db.flush()

        # 3. Create Users
        print("Creating users...")
        db.add_all([
            User(name="Demo Traveller", email="traveller@example.com"),
            User(name="Second Traveller", email="second@example.com"),
        ])
        db.flush()

        # 4. Create Schedules for the next week
        print("Creating schedules...")
        trips = [
            ("NYC", "BOS", buses[0], time(8, 0), timedelta(hours=4, minutes=30), Decimal("45.00")),
            ("BOS", "NYC", buses[1], time(9, 30), timedelta(hours=4, minutes=30), Decimal("45.00")),
            ("NYC", "PHL", buses[2], time(7, 15), timedelta(hours=2), Decimal("25.00")),
            ("PHL", "WAS", buses[3], time(13, 0), timedelta(hours=3), Decimal("30.00")),
        ]

        today = datetime.now().date()
        schedule_count = 0
        # Every other day so a bus always gets its 24 hour turnaround
        for day_offset in range(1, 8, 2):
            service_date = today + timedelta(days=day_offset)
            for source, destination, bus, departs, duration, cost in trips:
                departure = datetime.combine(service_date, departs)
                db.add(TravelSchedule(
                    source_id=stations[source].id,
                    destination_id=stations[destination].id,
                    bus_id=bus.id,
                    estimated_departure_time=departure,
                    estimated_arrival_time=departure + duration,
                    total_seat=bus.capacity,
                    seat_booked=0,
                    available_seat=bus.capacity,
                    seat_cost=cost
                ))
                schedule_count += 1

        db.commit()
        print(f"Seed data created: {len(stations)} stations, {len(buses)} buses, {schedule_count} schedules")

    except Exception as e:
        print(f"Error creating seed data: {e}")
        db.rollback()
        raise
    finally:
        db.close()

if __name__ == "__main__":
    create_seed_data()
