"""
HTTP tests for the FastAPI app.

The app is wired to a fresh in-memory store per test through
dependency_overrides; everything else (routing, validation, error
mapping) is the real thing.
"""

from coach_scheduling.core.scheduling.models import SLOT_DURATION, TUESDAY
from coach_scheduling.core.scheduling.timeconv import format_instant, local_wall_clock_to_utc

from tests.conftest import next_local_weekday


def create_coach(client, name="Priya", tz="Asia/Kolkata"):
    response = client.post("/api/v1/coaches", json={"name": name, "timezone": tz})
    assert response.status_code == 201
    return response.json()


def add_window(client, coach_id, day=TUESDAY, start="09:00", end="12:00"):
    return client.post(
        "/api/v1/coaches/availability",
        json={"coach_id": coach_id, "day": day, "start_time": start, "end_time": end},
    )


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

class TestHealth:

    def test_liveness(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_readiness(self, client):
        response = client.get("/health/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ready"
        assert {c["name"] for c in body["checks"]} == {"configuration", "database"}

    def test_root_points_to_docs(self, client):
        assert client.get("/").json()["docs"] == "/docs"


# ---------------------------------------------------------------------------
# Coaches
# ---------------------------------------------------------------------------

class TestCoachEndpoints:

    def test_create_coach(self, client):
        coach = create_coach(client)

        assert coach["id"] > 0
        assert coach["timezone"] == "Asia/Kolkata"

    def test_invalid_timezone(self, client):
        response = client.post("/api/v1/coaches", json={"name": "X", "timezone": "Mars/Base"})

        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_timezone"

    def test_add_availability(self, client):
        coach = create_coach(client)
        response = add_window(client, coach["id"])

        assert response.status_code == 201
        assert response.json()["start_time"] == "09:00"
        assert response.json()["day"] == TUESDAY

    def test_add_availability_bad_times(self, client):
        coach = create_coach(client)
        response = add_window(client, coach["id"], start="12:00", end="09:00")

        assert response.status_code == 400
        assert response.json()["kind"] == "malformed_input"

    def test_add_availability_unknown_coach(self, client):
        response = add_window(client, 999)

        assert response.status_code == 404
        assert response.json()["kind"] == "coach_not_found"

    def test_request_body_validation(self, client):
        response = client.post("/api/v1/coaches/availability", json={"coach_id": 1})
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# Slots and bookings
# ---------------------------------------------------------------------------

class TestBookingFlow:

    def test_full_flow(self, client):
        coach = create_coach(client)
        assert add_window(client, coach["id"]).status_code == 201

        day = next_local_weekday(TUESDAY, "Asia/Kolkata")
        first_slot = local_wall_clock_to_utc(day, 9, 0, "Asia/Kolkata")

        # 1. Six open slots starting at 09:00 local
        response = client.get(
            "/api/v1/users/slots",
            params={"coach_id": coach["id"], "date": day.isoformat()},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["timezone"] == "Asia/Kolkata"
        assert body["date"] == day.isoformat()
        assert len(body["slots"]) == 6
        assert body["slots"][0] == format_instant(first_slot)

        # 2. Book the first one
        response = client.post(
            "/api/v1/users/bookings",
            json={"user_id": 42, "coach_id": coach["id"], "datetime": body["slots"][0]},
        )
        assert response.status_code == 201
        booking = response.json()
        assert booking["status"] == "booked"
        assert booking["start"] == format_instant(first_slot)
        assert booking["end"] == format_instant(first_slot + SLOT_DURATION)

        # 3. Someone else tries the same slot
        response = client.post(
            "/api/v1/users/bookings",
            json={"user_id": 43, "coach_id": coach["id"], "datetime": body["slots"][0]},
        )
        assert response.status_code == 409
        assert response.json()["kind"] == "slot_conflict"

        # 4. It's gone from the slot list and shows up for the user
        slots = client.get(
            "/api/v1/users/slots",
            params={"coach_id": coach["id"], "date": day.isoformat()},
        ).json()["slots"]
        assert len(slots) == 5
        assert format_instant(first_slot) not in slots

        listed = client.get("/api/v1/users/bookings", params={"user_id": 42}).json()["bookings"]
        assert [b["id"] for b in listed] == [booking["id"]]
        assert listed[0]["start"] == booking["start"]

        # 5. Cancel, then cancel again
        response = client.delete(f"/api/v1/users/bookings/{booking['id']}")
        assert response.status_code == 200
        assert response.json() == {"status": "cancelled"}

        response = client.delete(f"/api/v1/users/bookings/{booking['id']}")
        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"

        assert client.get("/api/v1/users/bookings", params={"user_id": 42}).json()["bookings"] == []

    def test_slots_unknown_coach(self, client):
        response = client.get("/api/v1/users/slots", params={"coach_id": 999, "date": "2025-01-07"})

        assert response.status_code == 404
        assert response.json()["kind"] == "coach_not_found"

    def test_slots_bad_date(self, client):
        coach = create_coach(client)
        response = client.get(
            "/api/v1/users/slots",
            params={"coach_id": coach["id"], "date": "07-01-2025"},
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "malformed_input"

    def test_booking_off_boundary(self, client):
        coach = create_coach(client)
        add_window(client, coach["id"])

        response = client.post(
            "/api/v1/users/bookings",
            json={"user_id": 1, "coach_id": coach["id"], "datetime": "2025-01-07T03:15:00Z"},
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "boundary_violation"

    def test_booking_outside_availability(self, client):
        coach = create_coach(client)
        add_window(client, coach["id"])

        response = client.post(
            "/api/v1/users/bookings",
            json={"user_id": 1, "coach_id": coach["id"], "datetime": "2025-01-08T03:30:00Z"},
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "outside_availability"

    def test_booking_without_offset(self, client):
        coach = create_coach(client)
        response = client.post(
            "/api/v1/users/bookings",
            json={"user_id": 1, "coach_id": coach["id"], "datetime": "2025-01-07T03:30:00"},
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "malformed_input"

    def test_slots_at_end_of_calendar(self, client):
        coach = create_coach(client)
        response = client.get(
            "/api/v1/users/slots",
            params={"coach_id": coach["id"], "date": "9999-12-31"},
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "malformed_input"

    def test_booking_before_year_one_in_utc(self, client):
        coach = create_coach(client)
        response = client.post(
            "/api/v1/users/bookings",
            json={"user_id": 1, "coach_id": coach["id"], "datetime": "0001-01-01T00:00:00+05:30"},
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "malformed_input"


# ---------------------------------------------------------------------------
# Mock mode wiring
# ---------------------------------------------------------------------------

class TestMockMode:

    def test_shared_store_persists_across_requests(self, mock_mode_client):
        from coach_scheduling.api.dependencies import get_scheduling_store
        from coach_scheduling.config.settings import get_settings
        from coach_scheduling.infrastructure.database.memory import InMemorySchedulingStore

        coach = create_coach(mock_mode_client)
        assert add_window(mock_mode_client, coach["id"]).status_code == 201

        store = get_scheduling_store(get_settings())
        assert isinstance(store, InMemorySchedulingStore)
        assert store.lookup_coach_timezone(coach["id"]) == "Asia/Kolkata"

    def test_readiness_reports_mock_mode(self, mock_mode_client):
        body = mock_mode_client.get("/health/ready").json()
        database = next(c for c in body["checks"] if c["name"] == "database")

        assert body["status"] == "ready"
        assert database["error"] == "mock mode"

    def test_each_app_starts_with_a_fresh_store(self, mock_mode_client):
        """The shared store from earlier tests is gone after a reset."""
        response = add_window(mock_mode_client, 1)

        assert response.status_code == 404
        assert response.json()["kind"] == "coach_not_found"
