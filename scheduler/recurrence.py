"""
Recurrence Expansion.

Flattens one booking request into the concrete list of occurrences to place.
Pure function of its inputs: no shared state between calls.
"""

from datetime import date as date_type, datetime, time as time_type, timedelta
from typing import List, Optional, Tuple

from models import RecurrenceCadence
from .exceptions import InvalidRecurrence

# Five years of weekly sessions
MAX_OCCURRENCES = 260


class RecurrenceExpander:
    """Expands (first_start, first_end) by a weekly or biweekly step."""

    def expand(
        self,
        first_start: datetime,
        first_end: datetime,
        cadence: RecurrenceCadence = RecurrenceCadence.NONE,
        until: Optional[date_type] = None
    ) -> List[Tuple[datetime, datetime]]:
        """
        Returns occurrences in strictly increasing start order.

        `until` is inclusive through the end of that day: an occurrence is
        generated for every step whose start falls on or before it.
        """
        cadence = RecurrenceCadence(cadence)
        if cadence == RecurrenceCadence.NONE:
            return [(first_start, first_end)]

        if until is None:
            raise InvalidRecurrence("A repeating booking requires an 'until' date")
        if until < first_start.date():
            raise InvalidRecurrence(
                f"'until' ({until}) is before the first occurrence ({first_start.date()})"
            )

        step = timedelta(days=cadence.step_days)
        boundary = datetime.combine(until, time_type.max)

        # Number of steps whose start falls on or before the boundary
        count = (boundary - first_start) // step + 1
        if count > MAX_OCCURRENCES:
            raise InvalidRecurrence(
                f"Repeating until {until} would create {count} occurrences (limit {MAX_OCCURRENCES})"
            )

        try:
            return [(first_start + k * step, first_end + k * step) for k in range(count)]
        except OverflowError as e:
            raise InvalidRecurrence(f"Occurrences repeating until {until} fall outside the calendar") from e
