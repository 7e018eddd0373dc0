"""
Booking request models for the Room & Therapist Scheduler.

A request is the 'Demand' side of the engine: one room, one therapist,
a first interval and an optional weekly/biweekly cadence.
"""

from enum import Enum
from typing import Optional
from datetime import date, datetime
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

from scheduler.exceptions import InvalidRecurrence


class RecurrenceCadence(str, Enum):
    """How often a request repeats."""
    NONE = "none"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"

    @property
    def step_days(self) -> int:
        if self is RecurrenceCadence.WEEKLY:
            return 7
        if self is RecurrenceCadence.BIWEEKLY:
            return 14
        return 0


class ConflictPolicy(str, Enum):
    """What to do when an occurrence overlaps an existing booking in the room."""
    SKIP = "skip"
    REPLACE = "replace"


class BookingRequest(BaseModel):
    """
    A single scheduling request, expanded into one or more occurrences.
    """

    # --- Who & Where ---
    room_id: str = Field(min_length=1, description="Target room")
    staff_id: str = Field(min_length=1, description="Therapist holding the booking")

    # --- First Occurrence ---
    start: datetime = Field(description="Start of the first occurrence")
    end: datetime = Field(description="End of the first occurrence")
    notes: Optional[str] = Field(default=None, description="Free-text note copied to every occurrence")

    # --- Recurrence ---
    cadence: RecurrenceCadence = Field(default=RecurrenceCadence.NONE)
    until: Optional[date] = Field(
        default=None,
        description="Last date (inclusive) an occurrence may start on. Required when repeating."
    )

    @field_validator('start', 'end')
    @classmethod
    def validate_naive(cls, v: datetime) -> datetime:
        # Local wall-clock times only
        if v.tzinfo is not None:
            raise ValueError("Times must be local wall-clock values without a timezone offset")
        return v

    @model_validator(mode='after')
    def validate_request(self):
        if self.end <= self.start:
            raise ValueError("End time must be after start time")
        if self.cadence != RecurrenceCadence.NONE:
            if self.until is None:
                raise InvalidRecurrence("Select an 'until' date for repeating")
            if self.until < self.start.date():
                raise InvalidRecurrence("'until' cannot be before the first occurrence")
        return self

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "room_id": "room_01",
            "staff_id": "staff_01",
            "start": "2025-03-03T14:00:00",
            "end": "2025-03-03T15:00:00",
            "notes": "Intake session",
            "cadence": "weekly",
            "until": "2025-03-17"
        }
    })
