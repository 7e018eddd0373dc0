"""
Utilization Statistics.

Aggregates booked minutes against open capacity for a location, a room, or
every room, over an inclusive date range.

Booked time is clipped to each day's opening hours, so a booking entered
with slack before opening or after closing counts only its in-hours part.
Overlapping bookings in one room are NOT merged: once a double booking exists
in the store, both rows count and pct can exceed 100.
"""

import logging
from datetime import date as date_type, datetime, timedelta
from typing import Dict, Iterable, List, Optional

from models import Booking, Room, TimeInterval, UtilizationReport
from .business_calendar import BusinessCalendar

logger = logging.getLogger(__name__)


def clip_minutes(start: datetime, end: datetime, opening: TimeInterval) -> float:
    """Minutes of [start, end) falling inside the opening interval."""
    overlap = min(end, opening.end) - max(start, opening.start)
    return max(0.0, overlap.total_seconds() / 60)


def percent(used_minutes: float, open_minutes: int) -> int:
    """Rounded percentage, half-up; 0 when nothing is open."""
    if open_minutes <= 0:
        return 0
    return int(used_minutes * 100 / open_minutes + 0.5)


def _days(date_from: date_type, date_to: date_type) -> List[date_type]:
    return [date_from + timedelta(days=i) for i in range((date_to - date_from).days + 1)]


class UtilizationCalculator:
    """
    Capacity maths over the room list.
    Business hours are injected; `location_calendars` overrides them per location.
    """

    def __init__(
        self,
        calendar: BusinessCalendar,
        rooms: List[Room],
        location_calendars: Optional[Dict[str, BusinessCalendar]] = None
    ):
        self.calendar = calendar
        self.rooms = rooms
        self.room_map = {r.id: r for r in rooms}
        self.location_calendars = location_calendars or {}

    def calendar_for(self, room: Room) -> BusinessCalendar:
        return self.location_calendars.get(room.location_id, self.calendar)

    def rooms_in_scope(self, location_id: Optional[str] = None, room_id: Optional[str] = None) -> List[Room]:
        if room_id is not None:
            room = self.room_map.get(room_id)
            if room is None or (location_id is not None and room.location_id != location_id):
                return []
            return [room]
        if location_id is not None:
            return [r for r in self.rooms if r.location_id == location_id]
        return list(self.rooms)

    def utilization(
        self,
        bookings: Iterable[Booking],
        date_from: date_type,
        date_to: date_type,
        location_id: Optional[str] = None,
        room_id: Optional[str] = None
    ) -> UtilizationReport:
        """
        Used vs open minutes for the scope over [date_from, date_to].
        Bookings whose room is unknown are left out.
        """
        if date_to < date_from:
            raise ValueError("date_to cannot be before date_from")

        scope = {r.id: r for r in self.rooms_in_scope(location_id, room_id)}
        days = _days(date_from, date_to)

        # 1. Capacity
        open_minutes = 0
        for room in scope.values():
            cal = self.calendar_for(room)
            open_minutes += sum(cal.open_minutes(d) for d in days)

        # 2. Usage (clipped per day)
        used_minutes = 0.0
        dangling = 0
        for booking in bookings:
            room = scope.get(booking.room_id)
            if room is None:
                if booking.room_id not in self.room_map:
                    dangling += 1
                continue
            used_minutes += self._booked_minutes(booking, self.calendar_for(room), date_from, date_to)

        if dangling:
            logger.warning(f"Ignored {dangling} booking(s) referencing unknown rooms")

        return UtilizationReport(
            scope_id=room_id or location_id,
            date_from=date_from,
            date_to=date_to,
            used_minutes=used_minutes,
            open_minutes=open_minutes,
            pct=percent(used_minutes, open_minutes)
        )

    def by_location(
        self,
        bookings: Iterable[Booking],
        date_from: date_type,
        date_to: date_type
    ) -> Dict[str, UtilizationReport]:
        bookings = list(bookings)
        location_ids = sorted({r.location_id for r in self.rooms})
        return {
            loc_id: self.utilization(bookings, date_from, date_to, location_id=loc_id)
            for loc_id in location_ids
        }

    def by_room(
        self,
        bookings: Iterable[Booking],
        date_from: date_type,
        date_to: date_type
    ) -> Dict[str, UtilizationReport]:
        bookings = list(bookings)
        return {
            room.id: self.utilization(bookings, date_from, date_to, room_id=room.id)
            for room in self.rooms
        }

    def _booked_minutes(
        self,
        booking: Booking,
        cal: BusinessCalendar,
        date_from: date_type,
        date_to: date_type
    ) -> float:
        first = max(booking.start.date(), date_from)
        last = min(booking.end.date(), date_to)
        total = 0.0
        for day in _days(first, last):
            opening = cal.open_interval(day)
            if opening is None:
                continue
            total += clip_minutes(booking.start, booking.end, opening)
        return total
