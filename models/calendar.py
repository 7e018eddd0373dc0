"""
Calendar primitives: opening hours and half-open time intervals.
"""

from datetime import date as date_type, datetime
from typing import Dict, Optional, Tuple
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator


def day_index(day: date_type) -> int:
    """Day of week with 0=Sunday .. 6=Saturday."""
    return (day.weekday() + 1) % 7


class BusinessHoursSpec(BaseModel):
    """
    Weekly opening hours, keyed by day of week (0=Sunday .. 6=Saturday).
    A value of None (or a missing day) means the day is closed.
    """
    hours: Dict[int, Optional[Tuple[int, int]]] = Field(
        description="Day of week -> (open_hour, close_hour) in local wall-clock hours"
    )

    model_config = ConfigDict(frozen=True, json_schema_extra={
        "example": {
            "hours": {"0": None, "1": [9, 20], "2": [9, 20], "3": [9, 20],
                      "4": [9, 20], "5": [9, 16], "6": [9, 16]}
        }
    })

    @field_validator('hours')
    @classmethod
    def validate_hours(cls, v):
        for day, span in v.items():
            if not 0 <= day <= 6:
                raise ValueError(f"Day of week must be 0-6, got {day}")
            if span is None:
                continue
            open_hour, close_hour = span
            if not (0 <= open_hour < close_hour <= 24):
                raise ValueError(
                    f"Day {day}: opening hours must satisfy 0 <= open < close <= 24, got {span}"
                )
        return v

    def span_for(self, day: date_type) -> Optional[Tuple[int, int]]:
        return self.hours.get(day_index(day))


# Mon-Thu 9-20, Fri-Sat 9-16, Sun closed
DEFAULT_BUSINESS_HOURS = BusinessHoursSpec(hours={
    0: None,
    1: (9, 20),
    2: (9, 20),
    3: (9, 20),
    4: (9, 20),
    5: (9, 16),
    6: (9, 16),
})


class TimeInterval(BaseModel):
    """A half-open interval [start, end) of naive local datetimes."""
    start: datetime
    end: datetime

    model_config = ConfigDict(frozen=True)

    @model_validator(mode='after')
    def validate_order(self):
        if self.end <= self.start:
            raise ValueError("End time must be strictly after start time")
        return self

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60
