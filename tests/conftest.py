from typing import List

import pytest

from models import Location, Room, StaffMember
from scheduler.business_calendar import BusinessCalendar
from scheduler.engine import BookingScheduler
from scheduler.store import InMemoryBookingStore, StaticDirectory


@pytest.fixture()
def locations() -> List[Location]:
    return [
        Location(id="loc_down", name="Downtown"),
        Location(id="loc_river", name="Riverside"),
    ]


@pytest.fixture()
def rooms() -> List[Room]:
    return [
        Room(id="room_a", name="Room A", location_id="loc_down"),
        Room(id="room_b", name="Room B", location_id="loc_down"),
        Room(id="room_c", name="Room C", location_id="loc_river"),
    ]


@pytest.fixture()
def staff() -> List[StaffMember]:
    return [
        StaffMember(id="staff_ana", name="Ana", email="ana@example.com"),
        StaffMember(id="staff_ben", name="Ben"),
        StaffMember(id="staff_old", name="Olga", active=False),
    ]


@pytest.fixture()
def directory(locations, rooms, staff) -> StaticDirectory:
    return StaticDirectory(locations, rooms, staff)


@pytest.fixture()
def calendar() -> BusinessCalendar:
    return BusinessCalendar()


@pytest.fixture()
def store() -> InMemoryBookingStore:
    return InMemoryBookingStore()


@pytest.fixture()
def scheduler(store, directory) -> BookingScheduler:
    return BookingScheduler(store, directory)
