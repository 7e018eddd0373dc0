"""
Business Calendar.

Answers "is the business open on day D" and "when does it open and close".
Pure function of the injected BusinessHoursSpec and the day of week.
"""

from datetime import date as date_type, datetime, time as time_type, timedelta
from typing import Optional, Tuple

from models import BusinessHoursSpec, DEFAULT_BUSINESS_HOURS, TimeInterval


class BusinessCalendar:
    """
    Opening-hours lookups over a fixed weekly table. Boundaries are whole hours.
    """

    def __init__(self, spec: BusinessHoursSpec = DEFAULT_BUSINESS_HOURS):
        self.spec = spec

    def hours_for(self, day: date_type) -> Optional[Tuple[int, int]]:
        """(open_hour, close_hour) for the day, or None when closed."""
        span = self.spec.span_for(day)
        if span is None:
            return None
        return int(span[0]), int(span[1])

    def is_open(self, day: date_type) -> bool:
        return self.hours_for(day) is not None

    def open_interval(self, day: date_type) -> Optional[TimeInterval]:
        """The day's opening and closing instants, or None when closed."""
        span = self.hours_for(day)
        if span is None:
            return None
        open_hour, close_hour = span
        # close_hour may be 24, which time() cannot represent
        midnight = datetime.combine(day, time_type(0, 0))
        return TimeInterval(
            start=midnight + timedelta(hours=open_hour),
            end=midnight + timedelta(hours=close_hour),
        )

    def open_minutes(self, day: date_type) -> int:
        span = self.hours_for(day)
        if span is None:
            return 0
        return (span[1] - span[0]) * 60
