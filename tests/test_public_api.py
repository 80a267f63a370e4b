"""
Tests for the public booking page endpoints.
"""
import uuid
from datetime import timedelta

from app.services.booking.booking_service import BookingService


def booking_payload(service, booking_date, start_time="10:00", **overrides):
    payload = {
        "serviceId": str(service.id),
        "bookingDate": booking_date.isoformat(),
        "startTime": start_time,
        "customerName": "Ada Lovelace",
        "customerEmail": "ada@example.com",
        "customerPhone": "+1 555 0100",
    }
    payload.update(overrides)
    return payload


class TestPublicBusiness:

    def test_business_by_slug(self, client, business):
        response = client.get("/api/v1/public/business/test-studio")

        assert response.status_code == 200
        assert response.json()["name"] == "Test Studio"
        assert "ownerId" not in response.json()

    def test_unknown_slug(self, client, business):
        response = client.get("/api/v1/public/business/nope")

        assert response.status_code == 404
        assert response.json() == {"message": "Business not found"}

    def test_services(self, client, business, service):
        response = client.get("/api/v1/public/services/test-studio")

        assert response.status_code == 200
        services = response.json()
        assert len(services) == 1
        assert services[0]["duration"] == 30
        assert services[0]["formattedDuration"] == "30m"
        assert services[0]["price"] == 35.0

    def test_weekly_availability(self, client, business, weekly_rules):
        response = client.get("/api/v1/public/availability/test-studio")

        assert response.status_code == 200
        week = response.json()
        assert [day["dayOfWeek"] for day in week] == list(range(7))
        assert week[0]["isOpen"] is False
        assert week[1]["isOpen"] is True
        assert week[1]["maxBookingsPerSlot"] == 1


class TestPublicSlots:

    def test_slots(self, client, business, service, weekly_rules, monday):
        response = client.get(
            "/api/v1/public/slots/test-studio",
            params={"serviceId": str(service.id), "date": monday.isoformat()}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["serviceDuration"] == 30
        assert len(body["slots"]) == 16
        assert body["slots"][0] == {"time": "09:00", "endTime": "09:30", "available": True, "remainingCapacity": 1}

    def test_slots_reflect_new_booking(self, client, business, service, weekly_rules, monday):
        client.post("/api/v1/public/bookings/test-studio", json=booking_payload(service, monday))

        response = client.get(
            "/api/v1/public/slots/test-studio",
            params={"serviceId": str(service.id), "date": monday.isoformat()}
        )

        slots = {slot["time"]: slot for slot in response.json()["slots"]}
        assert slots["10:00"]["available"] is False
        assert slots["10:30"]["available"] is True

    def test_closed_day(self, client, business, service, weekly_rules, sunday):
        response = client.get(
            "/api/v1/public/slots/test-studio",
            params={"serviceId": str(service.id), "date": sunday.isoformat()}
        )

        assert response.status_code == 200
        assert response.json()["slots"] == []

    def test_past_date_has_no_available_slots(self, client, business, service, weekly_rules, monday):
        response = client.get(
            "/api/v1/public/slots/test-studio",
            params={"serviceId": str(service.id), "date": (monday - timedelta(days=14)).isoformat()}
        )

        assert response.status_code == 200
        slots = response.json()["slots"]
        assert len(slots) == 16
        assert not any(slot["available"] for slot in slots)

    def test_invalid_service(self, client, business, service, weekly_rules, monday):
        response = client.get(
            "/api/v1/public/slots/test-studio",
            params={"serviceId": str(uuid.uuid4()), "date": monday.isoformat()}
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid service"}


class TestPublicBookings:

    def test_create_booking(self, client, business, service, weekly_rules, monday):
        response = client.post("/api/v1/public/bookings/test-studio", json=booking_payload(service, monday))

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["startTime"] == "10:00"
        assert body["endTime"] == "10:30"
        assert body["bookingDate"] == monday.isoformat()
        assert body["customerEmail"] == "ada@example.com"

    def test_iso_timestamp_date_is_accepted(self, client, business, service, weekly_rules, monday):
        payload = booking_payload(service, monday, bookingDate=f"{monday.isoformat()}T00:00:00")

        response = client.post("/api/v1/public/bookings/test-studio", json=payload)

        assert response.status_code == 201
        assert response.json()["bookingDate"] == monday.isoformat()

    def test_double_booking(self, client, business, service, weekly_rules, monday):
        first = client.post("/api/v1/public/bookings/test-studio", json=booking_payload(service, monday))
        second = client.post(
            "/api/v1/public/bookings/test-studio",
            json=booking_payload(service, monday, start_time="10:15", customerEmail="bob@example.com")
        )

        assert first.status_code == 201
        assert second.status_code == 400
        assert second.json() == {"message": "Time slot not available"}

    def test_invalid_service(self, client, business, service, weekly_rules, monday):
        response = client.post(
            "/api/v1/public/bookings/test-studio",
            json=booking_payload(service, monday, serviceId=str(uuid.uuid4()))
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid service"}

    def test_invalid_email(self, client, business, service, weekly_rules, monday):
        response = client.post(
            "/api/v1/public/bookings/test-studio",
            json=booking_payload(service, monday, customerEmail="not-an-email")
        )

        assert response.status_code == 422

    def test_invalid_time_format(self, client, business, service, weekly_rules, monday):
        response = client.post(
            "/api/v1/public/bookings/test-studio",
            json=booking_payload(service, monday, start_time="10am")
        )

        assert response.status_code == 422

    def test_public_listing_hides_customer_details(self, client, business, service, weekly_rules, monday):
        client.post("/api/v1/public/bookings/test-studio", json=booking_payload(service, monday))

        response = client.get("/api/v1/public/bookings/test-studio", params={"date": monday.isoformat()})

        assert response.status_code == 200
        bookings = response.json()
        assert len(bookings) == 1
        assert bookings[0]["startTime"] == "10:00"
        assert "customerEmail" not in bookings[0]
        assert "customerName" not in bookings[0]

    def test_public_listing_without_date(self, client, business):
        response = client.get("/api/v1/public/bookings/test-studio")

        assert response.status_code == 200
        assert response.json() == []

    def test_public_listing_other_day(self, client, business, service, weekly_rules, monday):
        client.post("/api/v1/public/bookings/test-studio", json=booking_payload(service, monday))

        response = client.get(
            "/api/v1/public/bookings/test-studio",
            params={"date": (monday + timedelta(days=1)).isoformat()}
        )

        assert response.json() == []

    def test_public_listing_bad_date(self, client, business):
        response = client.get("/api/v1/public/bookings/test-studio", params={"date": "tomorrow"})

        assert response.status_code == 400


class TestHealth:

    def test_health(self, client):
        response = client.get("/health/")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_detailed_health_without_redis(self, client):
        body = client.get("/health/detailed").json()

        assert body["database"] == "healthy"
        assert body["redis"] == "unknown"
        assert body["overall"] == "healthy"

    def test_correlation_id_is_echoed(self, client):
        response = client.get("/health/", headers={"X-Correlation-ID": "abc-123"})

        assert response.headers["X-Correlation-ID"] == "abc-123"
        assert "X-Process-Time-Ms" in response.headers


class TestServerErrors:

    def test_unexpected_failure_uses_the_message_shape(self, client, business, service, weekly_rules, monday, monkeypatch):
        def failing_create(*args, **kwargs):
            raise RuntimeError("database went away")

        monkeypatch.setattr(BookingService, "create_booking", staticmethod(failing_create))

        response = client.post("/api/v1/public/bookings/test-studio", json=booking_payload(service, monday))

        assert response.status_code == 500
        assert response.json() == {"message": "Failed to create booking"}
