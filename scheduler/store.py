"""
Booking Store collaborators.

The engine never owns persistence. It talks to two collaborators:
1. BookingStore - query / insert / delete booking rows.
2. ReferenceDirectory - read-only locations, rooms and staff.

InMemoryBookingStore and StaticDirectory are the process-local implementations
used by the CLI, the API and the tests. Each store operation is independently
committed; no lock is held across two calls.
"""

import logging
import threading
import uuid
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from models import Booking, Location, Room, StaffMember, TimeInterval
from .conflicts import intervals_overlap

logger = logging.getLogger(__name__)


class BookingStore(ABC):
    """Persistence boundary for booking rows. Implementations raise StoreError on failure."""

    @abstractmethod
    def query_bookings_by_room(self, room_id: str, window: Optional[TimeInterval] = None) -> List[Booking]:
        """Bookings in the room, optionally only those overlapping `window`."""

    @abstractmethod
    def insert_bookings(self, bookings: List[Booking]) -> List[Booking]:
        """Persist new rows and return them with identities assigned."""

    @abstractmethod
    def delete_bookings_by_id(self, ids: Iterable[str]) -> int:
        """Delete rows by id. Unknown ids are ignored; returns the number deleted."""

    @abstractmethod
    def delete_bookings_by_series(self, series_id: str) -> int:
        """Delete every occurrence tagged with `series_id`."""

    @abstractmethod
    def get_booking(self, booking_id: str) -> Optional[Booking]:
        pass

    @abstractmethod
    def query_bookings(
        self,
        room_ids: Optional[Iterable[str]] = None,
        window: Optional[TimeInterval] = None
    ) -> List[Booking]:
        """Bookings lying entirely inside `window`, ordered by start."""


class ReferenceDirectory(ABC):
    """Read-only reference data."""

    @abstractmethod
    def list_locations(self) -> List[Location]:
        pass

    @abstractmethod
    def list_rooms(self) -> List[Room]:
        pass

    @abstractmethod
    def list_staff(self) -> List[StaffMember]:
        """Every staff member, active or not."""

    def list_active_staff(self) -> List[StaffMember]:
        return [s for s in self.list_staff() if s.active]


class InMemoryBookingStore(BookingStore):
    """
    Process-local booking store.
    Keeps a per-room index so conflict queries only scan one room's rows.
    """

    def __init__(self, bookings: Optional[Iterable[Booking]] = None):
        self._lock = threading.Lock()

        # Master table
        self._bookings: Dict[str, Booking] = {}

        # Room index (room_id -> booking ids)
        self._room_index: Dict[str, List[str]] = defaultdict(list)

        if bookings:
            self.insert_bookings(list(bookings))

    def _new_id(self) -> str:
        return f"bkg_{uuid.uuid4().hex[:12]}"

    def query_bookings_by_room(self, room_id: str, window: Optional[TimeInterval] = None) -> List[Booking]:
        with self._lock:
            rows = [self._bookings[i] for i in self._room_index.get(room_id, [])]
        if window is not None:
            rows = [b for b in rows if intervals_overlap(b.start, b.end, window.start, window.end)]
        return sorted(rows, key=lambda b: b.start)

    def insert_bookings(self, bookings: List[Booking]) -> List[Booking]:
        stored = []
        with self._lock:
            for booking in bookings:
                if booking.id is None:
                    booking = booking.model_copy(update={"id": self._new_id()})
                previous = self._bookings.get(booking.id)
                if previous is not None:
                    self._room_index[previous.room_id].remove(previous.id)
                self._bookings[booking.id] = booking
                self._room_index[booking.room_id].append(booking.id)
                stored.append(booking)
        logger.debug(f"Inserted {len(stored)} booking(s)")
        return stored

    def delete_bookings_by_id(self, ids: Iterable[str]) -> int:
        deleted = 0
        with self._lock:
            for booking_id in ids:
                booking = self._bookings.pop(booking_id, None)
                if booking is None:
                    continue
                self._room_index[booking.room_id].remove(booking_id)
                deleted += 1
        logger.debug(f"Deleted {deleted} booking(s)")
        return deleted

    def delete_bookings_by_series(self, series_id: str) -> int:
        with self._lock:
            ids = [b.id for b in self._bookings.values() if b.series_id == series_id]
        return self.delete_bookings_by_id(ids)

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        with self._lock:
            return self._bookings.get(booking_id)

    def query_bookings(
        self,
        room_ids: Optional[Iterable[str]] = None,
        window: Optional[TimeInterval] = None
    ) -> List[Booking]:
        with self._lock:
            rows = list(self._bookings.values())
        if room_ids is not None:
            wanted = set(room_ids)
            rows = [b for b in rows if b.room_id in wanted]
        if window is not None:
            rows = [b for b in rows if b.start >= window.start and b.end <= window.end]
        return sorted(rows, key=lambda b: b.start)

    def __len__(self) -> int:
        return len(self._bookings)


class StaticDirectory(ReferenceDirectory):
    """Reference data held in memory, in display (name) order."""

    def __init__(
        self,
        locations: List[Location],
        rooms: List[Room],
        staff: List[StaffMember]
    ):
        self.locations = sorted(locations, key=lambda l: l.name)
        self.rooms = sorted(rooms, key=lambda r: r.name)
        self.staff = sorted(staff, key=lambda s: s.name)

        # Lookups
        self.room_map = {r.id: r for r in rooms}
        self.staff_map = {s.id: s for s in staff}

    def list_locations(self) -> List[Location]:
        return list(self.locations)

    def list_rooms(self) -> List[Room]:
        return list(self.rooms)

    def list_staff(self) -> List[StaffMember]:
        return list(self.staff)

    def rooms_for_location(self, location_id: Optional[str]) -> List[Room]:
        """Rooms at one location, or every room when location_id is None."""
        if location_id is None:
            return self.list_rooms()
        return [r for r in self.rooms if r.location_id == location_id]
