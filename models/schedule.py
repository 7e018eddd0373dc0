"""
Schedule data models for the Room & Therapist Scheduler.

This module defines the 'Output' of the booking engine:
1. Bookings (committed occurrences, immutable once stored)
2. Scheduling results (what a request created, skipped and replaced)
3. Display projections (day grids) and utilization reports
"""

from typing import List, Optional
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict, model_validator
from datetime import date as date_type, datetime

from .calendar import TimeInterval
from .request import RecurrenceCadence


class Booking(BaseModel):
    """
    One occurrence of a room booking.
    Occurrences of a recurring request are independent rows tagged with a shared series_id.
    """

    # --- Identity ---
    id: Optional[str] = Field(default=None, description="Assigned by the store on insert")

    # --- Core Scheduling Data ---
    room_id: str = Field(description="Booked room")
    staff_id: str = Field(description="Therapist holding the room")
    start: datetime = Field(description="Start instant (inclusive)")
    end: datetime = Field(description="End instant (exclusive)")
    notes: Optional[str] = Field(default=None)

    # --- Series Tagging (audit only, never drives computation) ---
    series_id: Optional[str] = Field(default=None, description="Shared by every occurrence of one recurring request")
    recurrence_cadence: Optional[RecurrenceCadence] = Field(default=None)
    recurrence_until: Optional[date_type] = Field(default=None, description="Date of the last expanded occurrence")

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "id": "bkg_5f0c2d",
            "room_id": "room_01",
            "staff_id": "staff_01",
            "start": "2025-03-03T14:00:00",
            "end": "2025-03-03T15:00:00",
            "notes": None,
            "series_id": "0d6f5a8e-6c1e-4d0b-9b55-8a4c2e4b7f10",
            "recurrence_cadence": "weekly",
            "recurrence_until": "2025-03-17"
        }
    })

    @model_validator(mode='after')
    def validate_times(self):
        if self.end <= self.start:
            raise ValueError("End time must be strictly after start time")
        return self

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval(start=self.start, end=self.end)

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60


class SkippedOccurrence(BaseModel):
    """An occurrence that was not created because the room was taken."""
    start: datetime
    end: datetime
    conflicting_ids: List[str] = Field(default_factory=list)


class SchedulingResult(BaseModel):
    """
    Outcome of one schedule() call.
    Partial success is normal: some occurrences may be created while others are skipped.
    """
    created: List[Booking] = Field(default_factory=list)
    skipped: int = Field(default=0, ge=0)
    series_id: Optional[str] = Field(default=None)

    skipped_occurrences: List[SkippedOccurrence] = Field(default_factory=list)
    replaced_ids: List[str] = Field(
        default_factory=list,
        description="Existing bookings deleted under the replace policy"
    )

    @property
    def created_count(self) -> int:
        return len(self.created)

    def record_created(self, booking: Booking) -> None:
        self.created.append(booking)

    def record_skipped(self, start: datetime, end: datetime, conflicting_ids: List[str]) -> None:
        self.skipped += 1
        self.skipped_occurrences.append(
            SkippedOccurrence(start=start, end=end, conflicting_ids=conflicting_ids)
        )

    def summary(self) -> str:
        if self.skipped:
            return f"{self.created_count} added, {self.skipped} skipped due to conflicts."
        return f"{self.created_count} added."


class GroupBy(str, Enum):
    """Axis used to re-key bookings for display."""
    ROOM = "room"
    STAFF = "staff"
    LOCATION = "location"


class GridRow(BaseModel):
    """One entity row of a day grid; cells line up with DayGrid.slots."""
    entity_id: str
    label: str
    cells: List[List[Booking]] = Field(default_factory=list)


class DayGrid(BaseModel):
    """A single day's schedule, rendered as entity rows x time-slot columns."""
    day: date_type
    group_by: GroupBy
    closed: bool = Field(default=False, description="True when the business is closed that day")
    slots: List[TimeInterval] = Field(default_factory=list)
    rows: List[GridRow] = Field(default_factory=list)


class UtilizationReport(BaseModel):
    """Booked time against open capacity for one scope over a date range."""
    scope_id: Optional[str] = Field(default=None, description="Location or room id; None for every room")
    date_from: date_type
    date_to: date_type
    used_minutes: float = Field(ge=0)
    open_minutes: int = Field(ge=0)
    pct: int = Field(ge=0, description="round(used / open * 100), 0 when nothing is open")
