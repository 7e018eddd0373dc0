"""
Main Execution Script for the Room & Therapist Scheduler.
Loads (or generates) a practice, places a demo recurring booking, reports
utilization and exports the dashboard JSON and a bookings CSV.
"""

import csv
import io
import json
import logging
from datetime import date, datetime, timedelta
from typing import List

from config import Config
from generators.data_factory import DataGenerator
from generators.seed_io import load_seed_data, save_seed_data
from models import (
    Booking,
    BookingRequest,
    ConflictPolicy,
    GroupBy,
    Location,
    RecurrenceCadence,
    Room,
    StaffMember
)
from scheduler.business_calendar import BusinessCalendar
from scheduler.engine import BookingScheduler
from scheduler.projection import GroupingProjector
from scheduler.slots import SlotGridBuilder, display_days
from scheduler.store import InMemoryBookingStore, StaticDirectory
from scheduler.utilization import UtilizationCalculator

logger = logging.getLogger("Main")

CSV_COLUMNS = ["Booking ID", "Series ID", "Therapist", "Room", "Location", "Start", "End", "Minutes", "Notes"]


def export_bookings_csv(
    bookings: List[Booking],
    staff: List[StaffMember],
    rooms: List[Room],
    locations: List[Location]
) -> str:
    """Bookings as CSV text. Unknown therapists, rooms or locations export as empty cells."""
    staff_names = {s.id: s.name for s in staff}
    room_map = {r.id: r for r in rooms}
    location_names = {l.id: l.name for l in locations}

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for b in bookings:
        room = room_map.get(b.room_id)
        minutes = max(0, int((b.end - b.start).total_seconds() // 60))
        writer.writerow([
            b.id,
            b.series_id or "",
            staff_names.get(b.staff_id, ""),
            room.name if room else "",
            location_names.get(room.location_id, "") if room else "",
            b.start.isoformat(),
            b.end.isoformat(),
            minutes,
            (b.notes or "").replace("\n", " ")
        ])
    return buffer.getvalue()


def export_dashboard_data(
    store: InMemoryBookingStore,
    directory: StaticDirectory,
    calendar: BusinessCalendar,
    anchor: date,
    group_by: GroupBy = GroupBy.ROOM,
    filename: str = "dashboard_data.json"
) -> dict:
    """
    Serializes the display window into a JSON format for the frontend:
    one grid per open day plus utilization per location.
    """
    logger.info(f"💾 Exporting dashboard data to {filename}...")

    days = display_days(anchor, calendar, Config.DISPLAY_WEEKS)
    slot_builder = SlotGridBuilder(calendar, Config.SLOT_MINUTES)
    projector = GroupingProjector(directory.list_locations(), directory.list_rooms(), directory.list_staff())

    data = {
        "schedule": {},
        "utilization": {}
    }

    if days:
        window_start = datetime.combine(days[0], datetime.min.time())
        window_end = datetime.combine(days[-1], datetime.max.time())
        bookings = [
            b for b in store.query_bookings()
            if b.start >= window_start and b.end <= window_end
        ]

        # 1. Schedule (one grid per day)
        for day in days:
            grid = projector.day_grid(day, group_by, bookings, slot_builder.slots_for(day))
            data["schedule"][day.isoformat()] = grid.model_dump(mode='json')

        # 2. Utilization (per location)
        calculator = UtilizationCalculator(calendar, directory.list_rooms())
        for loc_id, report in calculator.by_location(bookings, days[0], days[-1]).items():
            data["utilization"][loc_id] = report.model_dump(mode='json')

    with open(filename, 'w') as f:
        json.dump(data, f, indent=2)
    logger.info("✅ Dashboard data exported.")
    return data


def next_weekday(anchor: date, weekday: int) -> date:
    """First date on/after anchor with the given Python weekday (0=Monday)."""
    return anchor + timedelta(days=(weekday - anchor.weekday()) % 7)


def main():
    logging.basicConfig(
        level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler()]
    )

    logger.info("🚀 Starting Room & Therapist Scheduler...")
    anchor = date.today()
    calendar = BusinessCalendar(Config.BUSINESS_HOURS)

    # --- PHASE 1: DATA ACQUISITION (Seed file vs. Generator) ---
    resources, bookings = (None, [])
    if Config.DATA_FILE:
        resources, bookings = load_seed_data(Config.DATA_FILE)

    if not resources:
        generator = DataGenerator(seed=Config.DEMO_SEED, calendar=calendar)
        resources = generator.generate_resources()
        bookings = generator.generate_bookings(resources["rooms"], resources["staff"], anchor, Config.DISPLAY_WEEKS)
        if Config.DATA_FILE:
            save_seed_data({**resources, "bookings": bookings}, Config.DATA_FILE)

    directory = StaticDirectory(resources["locations"], resources["rooms"], resources["staff"])
    store = InMemoryBookingStore(bookings)
    scheduler = BookingScheduler(store, directory)

    # --- PHASE 2: DEMO REQUEST ---
    active = directory.list_active_staff()
    rooms = directory.list_rooms()
    if not active or not rooms:
        logger.error("❌ No active staff or rooms available. Exiting.")
        return

    first_day = next_weekday(anchor, 0)
    start = datetime.combine(first_day, datetime.min.time()).replace(hour=14)
    request = BookingRequest(
        room_id=rooms[0].id,
        staff_id=active[0].id,
        start=start,
        end=start + timedelta(hours=1),
        notes="Weekly supervision",
        cadence=RecurrenceCadence.WEEKLY,
        until=first_day + timedelta(weeks=2)
    )
    result = scheduler.schedule(request, ConflictPolicy(Config.DEFAULT_CONFLICT_POLICY))

    # --- PHASE 3: REPORTING ---
    print("\n" + "=" * 50)
    print("📊 SCHEDULING REPORT")
    print("=" * 50)
    print(result.summary())
    for skipped in result.skipped_occurrences:
        print(f"❌ {skipped.start:%a %b %d %H:%M}-{skipped.end:%H:%M} clashes with {', '.join(skipped.conflicting_ids)}")
    if result.replaced_ids:
        print(f"♻️ Replaced: {', '.join(result.replaced_ids)}")

    # --- PHASE 4: EXPORT FOR FRONTEND ---
    data = export_dashboard_data(store, directory, calendar, anchor, filename=Config.DASHBOARD_FILE)
    for loc_id, report in data["utilization"].items():
        print(f"🏢 {loc_id}: {report['pct']}% ({report['used_minutes']:.0f}/{report['open_minutes']} min)")

    with open(Config.CSV_EXPORT_FILE, 'w', newline='') as f:
        f.write(export_bookings_csv(store.query_bookings(), directory.list_staff(), rooms, directory.list_locations()))
    logger.info(f"💾 Exported {len(store)} bookings to {Config.CSV_EXPORT_FILE}")

    print("\n✅ Run Complete.")


if __name__ == "__main__":
    main()
