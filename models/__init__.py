"""
Data models package for the Room & Therapist Scheduler.

This package exports the three core pillars of the data architecture:
1. Demand (BookingRequest, RecurrenceCadence, ConflictPolicy)
2. Supply (Location, Room, StaffMember, BusinessHoursSpec)
3. Output (Booking, SchedulingResult, DayGrid, UtilizationReport)
"""

from .calendar import (
    BusinessHoursSpec,
    DEFAULT_BUSINESS_HOURS,
    TimeInterval,
    day_index
)

from .entities import (
    Location,
    Room,
    StaffMember
)

from .request import (
    BookingRequest,
    ConflictPolicy,
    RecurrenceCadence
)

from .schedule import (
    Booking,
    DayGrid,
    GridRow,
    GroupBy,
    SchedulingResult,
    SkippedOccurrence,
    UtilizationReport
)

__all__ = [
    # --- Calendar Primitives ---
    "BusinessHoursSpec",
    "DEFAULT_BUSINESS_HOURS",
    "TimeInterval",
    "day_index",

    # --- Demand Models ---
    "BookingRequest",
    "ConflictPolicy",
    "RecurrenceCadence",

    # --- Reference Data ---
    "Location",
    "Room",
    "StaffMember",

    # --- Output Models ---
    "Booking",
    "DayGrid",
    "GridRow",
    "GroupBy",
    "SchedulingResult",
    "SkippedOccurrence",
    "UtilizationReport",
]
