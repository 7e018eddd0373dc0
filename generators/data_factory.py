"""
Demo data generator for the Room & Therapist Scheduler.
STRATEGY: Seeded randomness, so the same seed always yields the same practice.
Bookings are generated inside opening hours and never double-book a room.
"""

import logging
import random
import uuid
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

from models import Booking, Location, Room, StaffMember
from scheduler.business_calendar import BusinessCalendar
from scheduler.conflicts import ConflictDetector
from scheduler.slots import display_days

logger = logging.getLogger(__name__)

LOCATION_NAMES = ["Downtown", "Riverside", "Northgate", "Harbour View", "Old Town"]
STAFF_NAMES = [
    "Avery Brooks", "Jordan Lee", "Sam Patel", "Riley Chen", "Morgan Diaz",
    "Casey Nguyen", "Taylor Okafor", "Jamie Rossi", "Quinn Murphy", "Drew Kim"
]
STAFF_COLORS = ["#6366F1", "#10B981", "#F59E0B", "#EF4444", "#3B82F6", "#8B5CF6"]
SESSION_NOTES = [None, None, None, "Intake", "Follow-up", "Couples session", "Supervision"]


class DataGenerator:
    def __init__(self, seed: int = 7, calendar: Optional[BusinessCalendar] = None):
        self.rng = random.Random(seed)
        self.calendar = calendar or BusinessCalendar()
        self.detector = ConflictDetector()

    def generate_resources(
        self,
        location_count: int = 2,
        rooms_per_location: int = 3,
        staff_count: int = 5,
        inactive_count: int = 1
    ) -> Dict[str, List]:
        """Locations, their rooms, and a staff list with a few inactive members at the end."""
        location_count = min(location_count, len(LOCATION_NAMES))
        staff_count = min(staff_count, len(STAFF_NAMES))

        locations = [
            Location(id=f"loc_{i + 1:02d}", name=LOCATION_NAMES[i])
            for i in range(location_count)
        ]

        rooms = []
        for loc in locations:
            for n in range(rooms_per_location):
                rooms.append(Room(
                    id=f"{loc.id}_room_{n + 1:02d}",
                    name=f"{loc.name} Room {n + 1}",
                    location_id=loc.id
                ))

        staff = []
        for i in range(staff_count):
            name = STAFF_NAMES[i]
            staff.append(StaffMember(
                id=f"staff_{i + 1:02d}",
                name=name,
                email=f"{name.split()[0].lower()}@example.com",
                active=i < staff_count - inactive_count,
                color=STAFF_COLORS[i % len(STAFF_COLORS)]
            ))

        logger.info(f"Generated {len(locations)} locations, {len(rooms)} rooms, {len(staff)} staff")
        return {"locations": locations, "rooms": rooms, "staff": staff}

    def generate_bookings(
        self,
        rooms: List[Room],
        staff: List[StaffMember],
        anchor: date,
        weeks: int = 2,
        per_room_per_day: int = 3
    ) -> List[Booking]:
        """
        Whole-hour bookings (1-2h) across the display window. Attempts that
        would overlap an earlier booking in the same room are dropped.
        """
        active = [s for s in staff if s.active]
        if not active or not rooms:
            return []

        bookings: List[Booking] = []
        for day in display_days(anchor, self.calendar, weeks):
            open_hour, close_hour = self.calendar.hours_for(day)
            for room in rooms:
                taken: List[Booking] = []
                for _ in range(per_room_per_day):
                    hours = self.rng.choice([1, 1, 2])
                    if close_hour - hours < open_hour:
                        continue
                    start_hour = self.rng.randint(open_hour, close_hour - hours)
                    start = datetime(day.year, day.month, day.day, start_hour)
                    candidate = Booking(
                        id=f"bkg_{uuid.UUID(int=self.rng.getrandbits(128)).hex[:12]}",
                        room_id=room.id,
                        staff_id=self.rng.choice(active).id,
                        start=start,
                        end=start + timedelta(hours=hours),
                        notes=self.rng.choice(SESSION_NOTES)
                    )
                    if self.detector.has_conflict(taken, candidate):
                        continue
                    taken.append(candidate)
                bookings.extend(taken)

        logger.info(f"Generated {len(bookings)} demo bookings from {anchor}")
        return bookings
