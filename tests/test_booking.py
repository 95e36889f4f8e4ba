from decimal import Decimal

import pytest

from bus_booking.bookings.booking_service import BookingService
from bus_booking.bookings.schemas import ExtraAddon
from bus_booking.exceptions import InsufficientSeats, ScheduleNotFound, UserNotFound
from bus_booking.models import Booking, TravelSchedule
from tests.helpers import at

URL = "/api/v1/bookings"


def book(client, schedule_id, user_id, seats, addons=None):
    payload = {"schedule_id": schedule_id, "user_id": user_id, "number_of_seats": seats}
    if addons is not None:
        payload["extra_addons"] = addons
    return client.post(URL, json=payload)


def counters(db, schedule_id):
    db.expire_all()
    schedule = db.get(TravelSchedule, schedule_id)
    return schedule.seat_booked, schedule.available_seat, schedule.total_seat


class TestBookingApi:
    def test_total_includes_tax_and_addons(self, client, db, world, make_schedule):
        schedule = make_schedule(at(2), seat_cost=Decimal("100.00"))

        response = book(
            client, schedule.id, world["user"].id, 3,
            addons=[{"name": "ColdDrink", "quantity": 2}, {"name": "Chips", "quantity": 1}],
        )

        assert response.status_code == 201
        body = response.json()
        assert Decimal(body["subtotal"]) == Decimal("300")
        assert Decimal(body["tax"]) == Decimal("36")
        assert Decimal(body["addon_cost"]) == Decimal("70")
        assert Decimal(body["total_amount"]) == Decimal("406")
        assert body["number_of_seats"] == 3
        assert body["unpriced_addons"] == []
        assert [(a["name"], a["quantity"]) for a in body["extra_addons"]] == [("ColdDrink", 2), ("Chips", 1)]
        assert counters(db, schedule.id) == (3, 37, 40)

    def test_schedule_snapshot_reflects_the_booking(self, client, world, make_schedule):
        schedule = make_schedule(at(2), seat_booked=5)

        body = book(client, schedule.id, world["user"].id, 2).json()

        assert body["schedule_id"] == schedule.id
        assert body["schedule"]["seat_booked"] == 7
        assert body["schedule"]["available_seat"] == 33
        assert body["schedule"]["source"]["station_code"] == "NYC"

    def test_unknown_addon_is_unpriced_not_rejected(self, client, world, make_schedule):
        schedule = make_schedule(at(2), seat_cost=Decimal("50.00"))

        response = book(
            client, schedule.id, world["user"].id, 1,
            addons=[{"name": "Sandwich", "quantity": 3}, {"name": "New Paper", "quantity": 2}],
        )

        assert response.status_code == 201
        body = response.json()
        assert body["unpriced_addons"] == ["Sandwich"]
        assert Decimal(body["addon_cost"]) == Decimal("20")
        assert Decimal(body["total_amount"]) == Decimal("76")
        sandwich = body["extra_addons"][0]
        assert sandwich["unit_price"] is None
        assert Decimal(sandwich["line_total"]) == Decimal("0")

    def test_insufficient_seats_leaves_counters_unchanged(self, client, db, world, make_schedule):
        schedule = make_schedule(at(2), total_seat=10, seat_booked=8)

        response = book(client, schedule.id, world["user"].id, 3)

        assert response.status_code == 409
        detail = response.json()["detail"]
        assert detail["error"] == "insufficient_seats"
        assert detail["requested_seats"] == 3
        assert detail["available_seats"] == 2
        assert counters(db, schedule.id) == (8, 2, 10)
        assert db.query(Booking).count() == 0

    def test_last_seats_can_be_booked(self, client, db, world, make_schedule):
        schedule = make_schedule(at(2), total_seat=10, seat_booked=8)

        assert book(client, schedule.id, world["user"].id, 2).status_code == 201
        assert counters(db, schedule.id) == (10, 0, 10)
        assert book(client, schedule.id, world["user"].id, 1).status_code == 409

    def test_unknown_user(self, client, make_schedule):
        schedule = make_schedule(at(2))

        response = book(client, schedule.id, 9999, 1)

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "user_not_found"

    def test_unknown_schedule(self, client, world):
        response = book(client, 9999, world["user"].id, 1)

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "schedule_not_found"

    def test_seat_count_must_be_positive(self, client, world, make_schedule):
        schedule = make_schedule(at(2))

        assert book(client, schedule.id, world["user"].id, 0).status_code == 422

    def test_read_back_bookings(self, client, world, make_schedule):
        schedule = make_schedule(at(2))
        first = book(client, schedule.id, world["user"].id, 1).json()
        second = book(client, schedule.id, world["user"].id, 2).json()

        assert client.get(f"{URL}/{first['id']}").json()["total_amount"] == first["total_amount"]
        listed = client.get(f"{URL}/user/{world['user'].id}").json()
        assert [b["id"] for b in listed] == [second["id"], first["id"]]
        assert client.get(f"{URL}/123456").status_code == 404


class TestBookingService:
    def test_user_is_resolved_before_schedule(self, db, world):
        with pytest.raises(UserNotFound):
            BookingService(db).book(schedule_id=1234, user_id=5678, number_of_seats=1)

    def test_missing_schedule(self, db, world):
        with pytest.raises(ScheduleNotFound) as exc:
            BookingService(db).book(schedule_id=1234, user_id=world["user"].id, number_of_seats=1)

        assert exc.value.context == {"schedule_id": 1234}

    def test_stale_read_cannot_overbook(self, session_factory, world, make_schedule):
        schedule_id = make_schedule(at(2), total_seat=5).id
        user_id = world["user"].id

        first = session_factory()
        second = session_factory()
        try:
            stale = first.get(TravelSchedule, schedule_id)
            assert stale.available_seat == 5

            BookingService(second).book(schedule_id, user_id, 4)

            # first still sees 5 free seats in its identity map
            with pytest.raises(InsufficientSeats) as exc:
                BookingService(first).book(schedule_id, user_id, 3)
            assert exc.value.context["available_seats"] == 1
        finally:
            first.close()
            second.close()

        check = session_factory()
        try:
            assert counters(check, schedule_id) == (4, 1, 5)
            assert check.query(Booking).count() == 1
        finally:
            check.close()

    def test_addons_default_to_none(self, db, world, make_schedule):
        schedule = make_schedule(at(2), seat_cost=Decimal("10.00"))

        record = BookingService(db).book(schedule.id, world["user"].id, 2)

        assert record.extra_addons == []
        assert record.total_amount == Decimal("22.40")

    def test_addons_as_value_objects(self, db, world, make_schedule):
        schedule = make_schedule(at(2), seat_cost=Decimal("10.00"))

        record = BookingService(db).book(
            schedule.id, world["user"].id, 1, [ExtraAddon(name="Chips", quantity=2)]
        )

        assert record.addon_cost == Decimal("60")
        assert record.total_amount == Decimal("71.20")
