"""
Grouping Projections.

Re-keys a flat booking list by room, staff member or location, and lays a
single day out as entity rows x slot columns for the schedule page.
"""

import logging
from collections import OrderedDict
from datetime import date as date_type
from typing import Dict, Iterable, List, Optional, Tuple

from models import (
    Booking,
    DayGrid,
    GridRow,
    GroupBy,
    Location,
    Room,
    StaffMember,
    TimeInterval
)

logger = logging.getLogger(__name__)


def booking_in_cell(booking: Booking, day: date_type, cell: TimeInterval) -> bool:
    """A booking shows in a cell when it starts on that day and overlaps the cell."""
    return booking.start.date() == day and booking.end > cell.start and booking.start < cell.end


def filter_bookings(
    bookings: Iterable[Booking],
    room_ids: Optional[Iterable[str]] = None,
    staff_id: Optional[str] = None
) -> List[Booking]:
    """Schedule-page filters; None means no restriction."""
    wanted_rooms = set(room_ids) if room_ids is not None else None
    result = []
    for b in bookings:
        if wanted_rooms is not None and b.room_id not in wanted_rooms:
            continue
        if staff_id is not None and b.staff_id != staff_id:
            continue
        result.append(b)
    return result


class GroupingProjector:
    """
    Buckets bookings per entity. Location mode joins through the room table;
    bookings whose room no longer resolves are dropped from that mode.
    """

    def __init__(
        self,
        locations: List[Location],
        rooms: List[Room],
        staff: List[StaffMember]
    ):
        self.locations = locations
        self.rooms = rooms
        self.staff = staff
        self.room_map = {r.id: r for r in rooms}

    def entities(self, group_by: GroupBy, location_id: Optional[str] = None) -> List[Tuple[str, str]]:
        """(id, label) rows for the mode, optionally narrowed to one location."""
        group_by = GroupBy(group_by)
        if group_by == GroupBy.ROOM:
            return [
                (r.id, r.name) for r in self.rooms
                if location_id is None or r.location_id == location_id
            ]
        if group_by == GroupBy.STAFF:
            return [(s.id, s.name) for s in self.staff]
        return [
            (l.id, l.name) for l in self.locations
            if location_id is None or l.id == location_id
        ]

    def key_for(self, booking: Booking, group_by: GroupBy) -> Optional[str]:
        """The entity id a booking belongs to under the mode, or None if it cannot be resolved."""
        if group_by == GroupBy.ROOM:
            return booking.room_id
        if group_by == GroupBy.STAFF:
            return booking.staff_id
        room = self.room_map.get(booking.room_id)
        return room.location_id if room else None

    def project(self, bookings: Iterable[Booking], group_by: GroupBy) -> Dict[str, List[Booking]]:
        """
        entity id -> bookings, in entity display order. Every entity gets a
        bucket (possibly empty); bookings matching no entity are left out.
        """
        group_by = GroupBy(group_by)
        buckets: Dict[str, List[Booking]] = OrderedDict(
            (entity_id, []) for entity_id, _ in self.entities(group_by)
        )

        dropped = 0
        for booking in bookings:
            key = self.key_for(booking, group_by)
            if key is None or key not in buckets:
                dropped += 1
                continue
            buckets[key].append(booking)

        if dropped:
            logger.debug(f"{dropped} booking(s) matched no {group_by.value} entity")
        return buckets

    def day_grid(
        self,
        day: date_type,
        group_by: GroupBy,
        bookings: Iterable[Booking],
        slots: List[TimeInterval],
        location_id: Optional[str] = None
    ) -> DayGrid:
        """One day's grid. A closed day has no slots and no rows."""
        group_by = GroupBy(group_by)
        if not slots:
            return DayGrid(day=day, group_by=group_by, closed=True)

        buckets = self.project(bookings, group_by)
        rows = []
        for entity_id, label in self.entities(group_by, location_id):
            entity_bookings = buckets.get(entity_id, [])
            cells = [
                [b for b in entity_bookings if booking_in_cell(b, day, slot)]
                for slot in slots
            ]
            rows.append(GridRow(entity_id=entity_id, label=label, cells=cells))

        return DayGrid(day=day, group_by=group_by, slots=slots, rows=rows)
