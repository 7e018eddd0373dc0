"""
Slot Grid Builder.

Cuts each open day into contiguous fixed-length slots. The same slots are the
grid columns on the schedule page.
"""

from datetime import date as date_type, timedelta
from typing import List, Optional

from models import TimeInterval
from .business_calendar import BusinessCalendar

DEFAULT_SLOT_MINUTES = 30


class SlotGridBuilder:
    """Produces the ordered display slots for a day."""

    def __init__(self, calendar: BusinessCalendar, slot_minutes: int = DEFAULT_SLOT_MINUTES):
        if slot_minutes <= 0:
            raise ValueError("slot_minutes must be positive")
        self.calendar = calendar
        self.slot_minutes = slot_minutes

    def slots_for(self, day: date_type, slot_minutes: Optional[int] = None) -> List[TimeInterval]:
        """
        Half-open slots spanning the day's opening hours; empty on closed days.
        A trailing partial slot is cut at closing time.
        """
        minutes = self.slot_minutes if slot_minutes is None else slot_minutes
        if minutes <= 0:
            raise ValueError("slot_minutes must be positive")

        opening = self.calendar.open_interval(day)
        if opening is None:
            return []

        step = timedelta(minutes=minutes)
        slots = []
        t = opening.start
        while t < opening.end:
            slots.append(TimeInterval(start=t, end=min(t + step, opening.end)))
            t += step
        return slots


def display_days(anchor: date_type, calendar: BusinessCalendar, weeks: int = 2) -> List[date_type]:
    """
    Open days shown on the schedule page: `weeks` weeks starting from the
    Monday of the anchor's week (Mon-Sat under the default hours).
    """
    monday = anchor - timedelta(days=anchor.weekday())
    days = [monday + timedelta(days=i) for i in range(weeks * 7)]
    return [d for d in days if calendar.is_open(d)]
