"""
Booking lifecycle tests: creation, status changes and deletion,
and how each of them moves the flight's seat counter.
"""
import re
from datetime import datetime, timedelta

import pytest

from skybook.models.flight import Flight
from skybook.services import booking_service

URL = "/api/v1/bookings"


def booking_body(flight, passenger, **kw):
    body = {"flightId": flight.id, "passengerId": passenger.id, "seatNumber": "12A", "totalPrice": 650}
    body.update(kw)
    return body


class TestCreateBooking:

    def test_create_decrements_seats(self, client, make_flight, make_passenger, seats):
        flight = make_flight(available_seats=5, total_seats=10)
        passenger = make_passenger()

        r = client.post(URL, json=booking_body(flight, passenger))

        assert r.status_code == 201
        data = r.json()
        assert data["flightId"] == flight.id
        assert data["passengerId"] == passenger.id
        assert data["status"] == "pending"
        assert data["totalPrice"] == 650
        assert re.fullmatch(r"BK[A-Z0-9]{6}", data["bookingReference"])
        assert seats(flight.id) == 4

    def test_timestamps_carry_utc_offset(self, client, make_flight, make_passenger):
        data = client.post(URL, json=booking_body(make_flight(), make_passenger())).json()
        for key in ("bookingDate", "createdAt", "updatedAt"):
            stamp = datetime.fromisoformat(data[key].replace("Z", "+00:00"))
            assert stamp.utcoffset() == timedelta(0)

    def test_explicit_status_kept(self, client, make_flight, make_passenger):
        r = client.post(URL, json=booking_body(make_flight(), make_passenger(), status="confirmed"))
        assert r.status_code == 201
        assert r.json()["status"] == "confirmed"

    def test_seat_number_normalized(self, client, make_flight, make_passenger):
        r = client.post(URL, json=booking_body(make_flight(), make_passenger(), seatNumber=" 14c "))
        assert r.status_code == 201
        assert r.json()["seatNumber"] == "14C"

    def test_numeric_strings_accepted(self, client, make_flight, make_passenger):
        flight, passenger = make_flight(), make_passenger()
        body = {"flightId": str(flight.id), "passengerId": str(passenger.id), "seatNumber": "3B", "totalPrice": "300"}
        r = client.post(URL, json=body)
        assert r.status_code == 201
        assert r.json()["totalPrice"] == 300

    def test_last_seat_then_sold_out(self, client, make_flight, make_passenger, seats):
        flight = make_flight(available_seats=1, total_seats=100)
        first, second = make_passenger(), make_passenger()

        r1 = client.post(URL, json=booking_body(flight, first, seatNumber="1A"))
        assert r1.status_code == 201
        assert seats(flight.id) == 0

        r2 = client.post(URL, json=booking_body(flight, second, seatNumber="1B"))
        assert r2.status_code == 409
        assert r2.json() == {"error": "No available seats on this flight", "code": "NO_AVAILABLE_SEATS"}
        assert seats(flight.id) == 0

    def test_flight_not_found(self, client, make_passenger):
        passenger = make_passenger()
        r = client.post(URL, json={"flightId": 999, "passengerId": passenger.id, "seatNumber": "1A", "totalPrice": 10})
        assert r.status_code == 404
        assert r.json()["code"] == "FLIGHT_NOT_FOUND"

    def test_passenger_not_found(self, client, make_flight):
        flight = make_flight()
        r = client.post(URL, json={"flightId": flight.id, "passengerId": 999, "seatNumber": "1A", "totalPrice": 10})
        assert r.status_code == 404
        assert r.json()["code"] == "PASSENGER_NOT_FOUND"

    def test_reference_exhaustion(self, client, monkeypatch, make_flight, make_passenger, make_booking, seats):
        flight, passenger = make_flight(available_seats=5), make_passenger()
        make_booking(flight, passenger, booking_reference="BKDUPE01")
        calls = []

        def _same_ref():
            calls.append(1)
            return "BKDUPE01"

        monkeypatch.setattr(booking_service, "make_booking_ref", _same_ref)

        r = client.post(URL, json=booking_body(flight, passenger))

        assert r.status_code == 500
        assert r.json()["code"] == "BOOKING_REFERENCE_GENERATION_FAILED"
        assert len(calls) == 10
        assert seats(flight.id) == 5

    def test_reference_retry_succeeds(self, client, monkeypatch, make_flight, make_passenger, make_booking):
        flight, passenger = make_flight(), make_passenger()
        make_booking(flight, passenger, booking_reference="BKDUPE01")
        refs = iter(["BKDUPE01", "BKDUPE01", "BKFRESH1"])
        monkeypatch.setattr(booking_service, "make_booking_ref", lambda: next(refs))

        r = client.post(URL, json=booking_body(flight, passenger))

        assert r.status_code == 201
        assert r.json()["bookingReference"] == "BKFRESH1"


class TestCreateBookingValidation:

    @pytest.mark.parametrize("field, code", [
        ("flightId", "MISSING_FLIGHT_ID"),
        ("passengerId", "MISSING_PASSENGER_ID"),
        ("seatNumber", "MISSING_SEAT_NUMBER"),
        ("totalPrice", "MISSING_TOTAL_PRICE"),
    ])
    def test_missing_field(self, client, field, code):
        body = {"flightId": 1, "passengerId": 1, "seatNumber": "12A", "totalPrice": 100}
        del body[field]
        r = client.post(URL, json=body)
        assert r.status_code == 400
        assert r.json()["code"] == code

    @pytest.mark.parametrize("field, value, code", [
        ("flightId", "abc", "INVALID_FLIGHT_ID"),
        ("passengerId", "x1", "INVALID_PASSENGER_ID"),
        ("totalPrice", 0, "INVALID_TOTAL_PRICE"),
        ("totalPrice", -20, "INVALID_TOTAL_PRICE"),
        ("totalPrice", "cheap", "INVALID_TOTAL_PRICE"),
        ("status", "booked", "INVALID_STATUS"),
        ("flightId", 10**20, "INVALID_FLIGHT_ID"),
        ("passengerId", 2**31, "INVALID_PASSENGER_ID"),
        ("totalPrice", 10**20, "INVALID_TOTAL_PRICE"),
    ])
    def test_malformed_field(self, client, field, value, code):
        body = {"flightId": 1, "passengerId": 1, "seatNumber": "12A", "totalPrice": 100}
        body[field] = value
        r = client.post(URL, json=body)
        assert r.status_code == 400
        assert r.json()["code"] == code

    @pytest.mark.parametrize("seat", ["A12", "12", "12AB", "1-A", "12Ä", "AA", "١٢A", "１２A"])
    def test_bad_seat_numbers(self, client, seat):
        r = client.post(URL, json={"flightId": 1, "passengerId": 1, "seatNumber": seat, "totalPrice": 100})
        assert r.status_code == 400
        assert r.json()["code"] == "INVALID_SEAT_NUMBER"

    def test_missing_reported_before_malformed(self, client):
        r = client.post(URL, json={"flightId": "abc", "passengerId": 1, "seatNumber": "12A"})
        assert r.json()["code"] == "MISSING_TOTAL_PRICE"

    def test_null_counts_as_missing(self, client):
        r = client.post(URL, json={"flightId": None, "passengerId": 1, "seatNumber": "12A", "totalPrice": 5})
        assert r.json()["code"] == "MISSING_FLIGHT_ID"

    def test_unknown_field_rejected(self, client):
        r = client.post(URL, json={"flightId": 1, "passengerId": 1, "seatNumber": "12A", "totalPrice": 5, "vip": True})
        assert r.status_code == 400
        assert r.json()["code"] == "INVALID_REQUEST_BODY"

    def test_error_body_shape(self, client):
        r = client.post(URL, json={})
        assert r.status_code == 400
        assert set(r.json()) == {"error", "code"}


class TestUpdateBooking:

    def test_cancel_releases_seat_once(self, client, make_flight, make_passenger, seats):
        flight = make_flight(available_seats=3, total_seats=10)
        booking = client.post(URL, json=booking_body(flight, make_passenger())).json()
        assert seats(flight.id) == 2

        r = client.put(f"{URL}/{booking['id']}", json={"status": "cancelled"})
        assert r.status_code == 200
        assert r.json()["status"] == "cancelled"
        assert seats(flight.id) == 3

        r = client.put(f"{URL}/{booking['id']}", json={"status": "cancelled"})
        assert r.status_code == 200
        assert seats(flight.id) == 3

    def test_confirm_does_not_touch_seats(self, client, make_flight, make_passenger, make_booking, seats):
        flight = make_flight(available_seats=4)
        booking = make_booking(flight, make_passenger(), status="pending")

        r = client.put(f"{URL}/{booking.id}", json={"status": "confirmed"})

        assert r.status_code == 200
        assert r.json()["status"] == "confirmed"
        assert seats(flight.id) == 4

    def test_release_never_exceeds_total(self, client, make_flight, make_passenger, make_booking, seats):
        flight = make_flight(available_seats=2, total_seats=2)
        booking = make_booking(flight, make_passenger())

        r = client.put(f"{URL}/{booking.id}", json={"status": "cancelled"})

        assert r.status_code == 200
        assert seats(flight.id) == 2

    def test_change_seat(self, client, make_flight, make_passenger, make_booking):
        booking = make_booking(make_flight(), make_passenger(), seat_number="1A")
        r = client.put(f"{URL}/{booking.id}", json={"seatNumber": "22f"})
        assert r.status_code == 200
        assert r.json()["seatNumber"] == "22F"
        assert r.json()["status"] == "confirmed"

    def test_invalid_status(self, client, make_flight, make_passenger, make_booking):
        booking = make_booking(make_flight(), make_passenger())
        r = client.put(f"{URL}/{booking.id}", json={"status": "refunded"})
        assert r.status_code == 400
        assert r.json()["code"] == "INVALID_STATUS"

    def test_invalid_seat(self, client, make_flight, make_passenger, make_booking):
        booking = make_booking(make_flight(), make_passenger())
        r = client.put(f"{URL}/{booking.id}", json={"seatNumber": "window"})
        assert r.status_code == 400
        assert r.json()["code"] == "INVALID_SEAT_NUMBER"

    def test_cancel_with_flight_gone(self, client, db, make_flight, make_passenger, make_booking):
        """The booking still cancels when its flight row has been removed; there is no seat to give back."""
        flight = make_flight()
        booking = make_booking(flight, make_passenger())
        db.delete(db.get(Flight, flight.id))
        db.commit()

        r = client.put(f"{URL}/{booking.id}", json={"status": "cancelled"})

        assert r.status_code == 200
        assert r.json()["status"] == "cancelled"
        assert db.get(Flight, flight.id) is None

    def test_not_found(self, client):
        r = client.put(f"{URL}/404", json={"status": "confirmed"})
        assert r.status_code == 404
        assert r.json()["code"] == "NOT_FOUND"

    def test_body_checked_before_lookup(self, client):
        r = client.put(f"{URL}/404", json={"status": "bogus"})
        assert r.status_code == 400
        assert r.json()["code"] == "INVALID_STATUS"

    def test_invalid_id(self, client):
        r = client.put(f"{URL}/abc", json={"status": "confirmed"})
        assert r.status_code == 400
        assert r.json()["code"] == "INVALID_ID"

    def test_id_out_of_range(self, client):
        r = client.put(f"{URL}/{10**20}", json={"status": "confirmed"})
        assert r.status_code == 400
        assert r.json()["code"] == "INVALID_ID"


class TestDeleteBooking:

    def test_delete_releases_seat(self, client, make_flight, make_passenger, seats):
        flight = make_flight(available_seats=5)
        booking = client.post(URL, json=booking_body(flight, make_passenger())).json()
        assert seats(flight.id) == 4

        r = client.delete(f"{URL}/{booking['id']}")

        assert r.status_code == 200
        assert r.json() == {"message": "Booking cancelled successfully", "bookingId": booking["id"]}
        assert seats(flight.id) == 5
        assert client.get(f"{URL}/{booking['id']}").status_code == 404

    def test_delete_cancelled_booking_keeps_seats(self, client, make_flight, make_passenger, seats):
        flight = make_flight(available_seats=5)
        booking = client.post(URL, json=booking_body(flight, make_passenger())).json()
        client.put(f"{URL}/{booking['id']}", json={"status": "cancelled"})
        assert seats(flight.id) == 5

        r = client.delete(f"{URL}/{booking['id']}")

        assert r.status_code == 200
        assert seats(flight.id) == 5

    def test_not_found(self, client):
        r = client.delete(f"{URL}/12345")
        assert r.status_code == 404
        assert r.json()["code"] == "NOT_FOUND"


class TestQueryBookings:

    def test_get_by_path_and_query(self, client, make_flight, make_passenger, make_booking):
        booking = make_booking(make_flight(), make_passenger())

        assert client.get(f"{URL}/{booking.id}").json()["bookingReference"] == booking.booking_reference
        assert client.get(URL, params={"id": booking.id}).json()["id"] == booking.id

        r = client.get(URL, params={"id": 999})
        assert r.status_code == 404
        assert r.json()["code"] == "BOOKING_NOT_FOUND"

    def test_filters(self, client, make_flight, make_passenger, make_booking):
        f1, f2 = make_flight(), make_flight()
        p1, p2 = make_passenger(), make_passenger()
        make_booking(f1, p1, booking_reference="BKAAA111", status="confirmed")
        make_booking(f1, p2, booking_reference="BKBBB222", status="pending")
        make_booking(f2, p1, booking_reference="BKAAA333", status="cancelled")

        assert len(client.get(URL).json()) == 3
        assert [b["bookingReference"] for b in client.get(URL, params={"status": "pending"}).json()] == ["BKBBB222"]
        assert len(client.get(URL, params={"flightId": f1.id}).json()) == 2
        assert len(client.get(URL, params={"passengerId": p1.id}).json()) == 2
        assert len(client.get(URL, params={"search": "AAA"}).json()) == 2
        assert len(client.get(URL, params={"limit": 1, "offset": 1}).json()) == 1

    def test_bad_query_params(self, client):
        assert client.get(URL, params={"status": "lost"}).json()["code"] == "INVALID_STATUS"
        assert client.get(URL, params={"offset": -1}).json()["code"] == "INVALID_PAGINATION"
        assert client.get(URL, params={"id": "x"}).json()["code"] == "INVALID_ID"

    def test_out_of_range_ids(self, client):
        assert client.get(f"{URL}/{10**20}").json()["code"] == "INVALID_ID"
        assert client.delete(f"{URL}/{10**20}").json()["code"] == "INVALID_ID"
        assert client.get(URL, params={"id": 10**20}).json()["code"] == "INVALID_ID"
        assert client.get(URL, params={"flightId": 10**20}).json()["code"] == "INVALID_FLIGHT_ID"
        assert client.get(URL, params={"passengerId": 10**20}).json()["code"] == "INVALID_PASSENGER_ID"
        assert client.get(URL, params={"offset": 10**20}).json()["code"] == "INVALID_PAGINATION"
