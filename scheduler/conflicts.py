"""
Room Conflict Detection.

This module answers the binary question: "Can this room be booked for [start, end)?"
Bookings are half-open intervals, so a booking ending at 11:00 and another
starting at 11:00 are adjacent, not overlapping.
"""

from datetime import datetime
from typing import Iterable, List, Protocol, TypeVar


class Interval(Protocol):
    start: datetime
    end: datetime


T = TypeVar("T", bound=Interval)


def intervals_overlap(s1: datetime, e1: datetime, s2: datetime, e2: datetime) -> bool:
    """Strict overlap of [s1, e1) and [s2, e2): StartA < EndB and StartB < EndA."""
    return s1 < e2 and s2 < e1


class ConflictDetector:
    """
    Checks a candidate interval against the existing bookings of ONE room.
    Callers pre-filter `existing` to the candidate's room.
    """

    def has_conflict(self, existing: Iterable[Interval], candidate: Interval) -> bool:
        for item in existing:
            if intervals_overlap(item.start, item.end, candidate.start, candidate.end):
                return True
        return False

    def find_conflicts(self, existing: Iterable[T], candidate: Interval) -> List[T]:
        """The overlapping subset of `existing`, in input order."""
        return [
            item for item in existing
            if intervals_overlap(item.start, item.end, candidate.start, candidate.end)
        ]
