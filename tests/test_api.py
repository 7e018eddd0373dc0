import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from models import Location
from scheduler.exceptions import StoreError
from scheduler.store import InMemoryBookingStore, StaticDirectory
from tests.helpers import MONDAY, at, make_booking


def booking_body(**overrides) -> dict:
    body = {
        "room_id": "room_a",
        "staff_id": "staff_ana",
        "start": "2025-03-03T14:00:00",
        "end": "2025-03-03T15:00:00",
        "cadence": "weekly",
        "until": "2025-03-17",
    }
    body.update(overrides)
    return body


@pytest.fixture()
def client(store, directory, calendar) -> TestClient:
    return TestClient(create_app(store, directory, calendar))


def test_reference_endpoints(client):
    assert [l["id"] for l in client.get("/locations").json()] == ["loc_down", "loc_river"]
    assert [r["id"] for r in client.get("/rooms", params={"locationId": "loc_river"}).json()] == ["room_c"]
    assert len(client.get("/staff").json()) == 2
    assert len(client.get("/staff", params={"includeInactive": "true"}).json()) == 3


def test_create_weekly_series(client, store):
    response = client.post("/bookings", json=booking_body(notes="Supervision"))

    assert response.status_code == 201
    payload = response.json()
    assert payload["created"] == 3
    assert payload["skipped"] == 0
    assert payload["message"] == "3 added."
    assert payload["series_id"]
    assert {b["series_id"] for b in payload["bookings"]} == {payload["series_id"]}
    assert len(store) == 3


def test_create_reports_skips(client, store):
    store.insert_bookings([make_booking("room_a", at(MONDAY, 14, 30), at(MONDAY, 15, 30), id="taken")])
    payload = client.post("/bookings", json=booking_body()).json()
    assert payload["created"] == 2
    assert payload["skipped"] == 1
    assert payload["message"] == "2 added, 1 skipped due to conflicts."


def test_create_with_replace_policy(client, store):
    store.insert_bookings([make_booking("room_a", at(MONDAY, 14, 30), at(MONDAY, 15, 30), id="taken")])
    payload = client.post("/bookings", json=booking_body(policy="replace")).json()
    assert payload["created"] == 3
    assert payload["replaced_ids"] == ["taken"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"end": "2025-03-03T14:00:00"},
        {"until": None},
        {"until": "2025-03-01"},
        {"room_id": ""},
    ],
)
def test_malformed_requests_are_422(client, store, overrides):
    response = client.post("/bookings", json=booking_body(**overrides))
    assert response.status_code == 422
    assert len(store) == 0


def test_inactive_staff_is_400(client, store):
    response = client.post("/bookings", json=booking_body(staff_id="staff_old"))
    assert response.status_code == 400
    assert "inactive" in response.json()["detail"]
    assert len(store) == 0


def test_store_failure_is_503_with_partial_counts(directory, calendar):
    class FlakyStore(InMemoryBookingStore):
        def insert_bookings(self, bookings):
            if len(self) >= 2:
                raise StoreError("database unavailable")
            return super().insert_bookings(bookings)

    client = TestClient(create_app(FlakyStore(), directory, calendar))
    response = client.post("/bookings", json=booking_body())

    assert response.status_code == 503
    assert response.json()["created"] == 2
    assert len(response.json()["bookings"]) == 2


def test_schedule_grid(client):
    client.post("/bookings", json=booking_body(cadence="none", until=None))
    response = client.get("/schedule", params={"date": "2025-03-03", "groupBy": "room", "locationId": "loc_down"})

    assert response.status_code == 200
    grid = response.json()
    assert grid["closed"] is False
    assert len(grid["slots"]) == 22
    assert [row["entity_id"] for row in grid["rows"]] == ["room_a", "room_b"]
    # 14:00 is the tenth half-hour slot after 09:00
    assert len(grid["rows"][0]["cells"][10]) == 1
    assert grid["rows"][1]["cells"][10] == []


def test_schedule_staff_filter_and_closed_day(client):
    client.post("/bookings", json=booking_body(cadence="none", until=None))
    grid = client.get("/schedule", params={"date": "2025-03-03", "groupBy": "staff", "staffId": "staff_ben"}).json()
    assert all(cell == [] for row in grid["rows"] for cell in row["cells"])

    sunday = client.get("/schedule", params={"date": "2025-03-02"}).json()
    assert sunday["closed"] is True
    assert sunday["rows"] == []


def test_schedule_unknown_room_is_404(client):
    response = client.get("/schedule", params={"date": "2025-03-03", "locationId": "loc_river", "roomId": "room_a"})
    assert response.status_code == 404


def test_utilization(client):
    client.post("/bookings", json=booking_body(cadence="none", until=None, start="2025-03-03T09:00:00", end="2025-03-03T20:00:00"))
    response = client.get("/utilization", params={"from": "2025-03-03", "to": "2025-03-03", "roomId": "room_a"})

    assert response.status_code == 200
    report = response.json()
    assert report["open_minutes"] == 660
    assert report["used_minutes"] == 660
    assert report["pct"] == 100


def test_utilization_reversed_range_is_400(client):
    response = client.get("/utilization", params={"from": "2025-03-07", "to": "2025-03-03"})
    assert response.status_code == 400


def test_delete_series(client, store):
    series_id = client.post("/bookings", json=booking_body()).json()["series_id"]

    assert client.delete(f"/bookings/series/{series_id}").status_code == 204
    assert len(store) == 0
    assert client.delete(f"/bookings/series/{series_id}").status_code == 404


def test_delete_booking(client, store):
    bookings = client.post("/bookings", json=booking_body()).json()["bookings"]

    assert client.delete(f"/bookings/{bookings[0]['id']}").status_code == 204
    assert len(store) == 2
    assert client.delete(f"/bookings/{bookings[1]['id']}", params={"wholeSeries": "true"}).status_code == 204
    assert len(store) == 0
    assert client.delete("/bookings/nope").status_code == 404


@pytest.mark.parametrize("suffix", ["Z", "+00:00", "+02:00"])
def test_timezone_offsets_are_422(client, store, suffix):
    store.insert_bookings([make_booking("room_a", at(MONDAY, 9), at(MONDAY, 10), id="naive")])

    weekly = booking_body(start=f"2025-03-03T14:00:00{suffix}", end=f"2025-03-03T15:00:00{suffix}")
    one_off = booking_body(
        start=f"2025-03-03T09:30:00{suffix}", end=f"2025-03-03T10:30:00{suffix}", cadence="none", until=None
    )

    assert client.post("/bookings", json=weekly).status_code == 422
    assert client.post("/bookings", json=one_off).status_code == 422
    assert len(store) == 1


def test_too_many_occurrences_is_400(client, store):
    response = client.post("/bookings", json=booking_body(until="2040-03-03"))
    assert response.status_code == 400
    assert len(store) == 0


@pytest.mark.parametrize(
    "params",
    [
        {"roomId": "room_zzz"},
        {"locationId": "loc_zzz"},
        {"locationId": "loc_river", "roomId": "room_a"},
    ],
)
def test_utilization_unknown_scope_is_404(client, params):
    response = client.get("/utilization", params={"from": "2025-03-03", "to": "2025-03-03", **params})
    assert response.status_code == 404


def test_utilization_known_location_without_rooms_is_zero(store, locations, rooms, staff, calendar):
    directory = StaticDirectory(locations + [Location(id="loc_new", name="Northgate")], rooms, staff)
    client = TestClient(create_app(store, directory, calendar))

    response = client.get("/utilization", params={"from": "2025-03-03", "to": "2025-03-03", "locationId": "loc_new"})
    assert response.status_code == 200
    assert response.json()["pct"] == 0


def test_schedule_unknown_location_is_404(client):
    response = client.get("/schedule", params={"date": "2025-03-03", "locationId": "loc_zzz"})
    assert response.status_code == 404
