"""
The Booking Scheduling Engine.

This module turns one booking request into committed occurrences.
It combines three steps per request:
1. Validation - everything that can be rejected is rejected before the store is touched.
2. Expansion - the request becomes an ordered list of occurrences.
3. Placement - each occurrence is conflict-checked against its room and then
   skipped, or inserted (after deleting what it overlaps, under the replace policy).
"""

import logging
import uuid
from typing import List, Optional, Tuple
from datetime import datetime

from models import (
    Booking,
    BookingRequest,
    ConflictPolicy,
    RecurrenceCadence,
    SchedulingResult,
    TimeInterval
)
from .conflicts import ConflictDetector
from .exceptions import BookingNotFound, BookingValidationError, StoreError
from .recurrence import RecurrenceExpander
from .store import BookingStore, ReferenceDirectory

logger = logging.getLogger(__name__)


class BookingScheduler:
    """
    Main scheduling engine.
    Ingests a BookingRequest, outputs a SchedulingResult with created/skipped counts.

    Occurrences are processed in chronological order and each one is fully
    committed before the next is checked, so later occurrences of a request see
    the earlier ones. Nothing is locked across store calls: two concurrent
    requests for the same slot can both pass their checks.
    """

    def __init__(
        self,
        store: BookingStore,
        directory: Optional[ReferenceDirectory] = None,
        expander: Optional[RecurrenceExpander] = None,
        detector: Optional[ConflictDetector] = None
    ):
        self.store = store
        self.directory = directory
        self.expander = expander or RecurrenceExpander()
        self.detector = detector or ConflictDetector()

    def schedule(
        self,
        request: BookingRequest,
        policy: ConflictPolicy = ConflictPolicy.SKIP
    ) -> SchedulingResult:
        """
        Execute the scheduling pipeline for one request.
        Raises BookingValidationError (or InvalidRecurrence) before any store call.
        """
        policy = ConflictPolicy(policy)

        # 1. Validate & Expand (no persistence yet)
        occurrences = self._validate(request)

        cadence = RecurrenceCadence(request.cadence)
        series_id = str(uuid.uuid4()) if cadence != RecurrenceCadence.NONE else None
        recurrence_until = occurrences[-1][1].date() if series_id else None

        result = SchedulingResult(series_id=series_id)
        logger.info(
            f"Scheduling {len(occurrences)} occurrence(s) in room {request.room_id} "
            f"for {request.staff_id} (policy={policy.value})"
        )

        # 2. Main Loop: place each occurrence in time order
        try:
            for start, end in occurrences:
                candidate = Booking(
                    room_id=request.room_id,
                    staff_id=request.staff_id,
                    start=start,
                    end=end,
                    notes=request.notes or None,
                    series_id=series_id,
                    recurrence_cadence=cadence if series_id else None,
                    recurrence_until=recurrence_until
                )
                self._place(candidate, policy, result)
        except StoreError as e:
            e.result = result
            logger.error(f"Store failure after {result.summary()} Reason: {e}")
            raise

        logger.info(result.summary())
        return result

    def cancel(self, booking_id: str, whole_series: bool = False) -> int:
        """
        Delete one occurrence, or its whole series when `whole_series` is set.
        Returns the number of rows removed.
        """
        booking = self.store.get_booking(booking_id)
        if booking is None:
            raise BookingNotFound(f"Booking {booking_id} not found")

        if whole_series and booking.series_id:
            deleted = self.store.delete_bookings_by_series(booking.series_id)
            logger.info(f"Deleted series {booking.series_id} ({deleted} occurrence(s))")
            return deleted

        return self.store.delete_bookings_by_id([booking_id])

    def cancel_series(self, series_id: str) -> int:
        deleted = self.store.delete_bookings_by_series(series_id)
        if deleted == 0:
            raise BookingNotFound(f"Series {series_id} not found")
        logger.info(f"Deleted series {series_id} ({deleted} occurrence(s))")
        return deleted

    def _validate(self, request: BookingRequest) -> List[Tuple[datetime, datetime]]:
        """Re-checks the request and expands it. Never touches the store."""
        if not request.room_id or not request.staff_id:
            raise BookingValidationError("Please complete all required fields.")
        if request.start is None or request.end is None:
            raise BookingValidationError("Please complete all required fields.")
        if request.start.tzinfo is not None or request.end.tzinfo is not None:
            raise BookingValidationError("Times must be local wall-clock values without a timezone offset.")
        if request.end <= request.start:
            raise BookingValidationError("End time must be after start time.")

        if self.directory is not None:
            room_ids = {r.id for r in self.directory.list_rooms()}
            if request.room_id not in room_ids:
                raise BookingValidationError(f"Unknown room {request.room_id}")

            staff = {s.id: s for s in self.directory.list_staff()}
            member = staff.get(request.staff_id)
            if member is None:
                raise BookingValidationError(f"Unknown staff member {request.staff_id}")
            if not member.active:
                raise BookingValidationError(f"{member.name} is inactive and cannot take new bookings")

        return self.expander.expand(request.start, request.end, request.cadence, request.until)

    def _place(self, candidate: Booking, policy: ConflictPolicy, result: SchedulingResult) -> None:
        """Conflict-check one occurrence and commit the outcome to the store and result."""
        window = TimeInterval(start=candidate.start, end=candidate.end)
        existing = self.store.query_bookings_by_room(candidate.room_id, window)
        conflicts = self.detector.find_conflicts(existing, candidate)

        if conflicts:
            conflict_ids = [c.id for c in conflicts]
            if policy == ConflictPolicy.SKIP:
                logger.warning(
                    f"Skipping {candidate.start:%Y-%m-%d %H:%M}-{candidate.end:%H:%M} "
                    f"in room {candidate.room_id}: clashes with {conflict_ids}"
                )
                result.record_skipped(candidate.start, candidate.end, conflict_ids)
                return

            # Replace works per occurrence: only the overlapping rows go, never their whole series
            self.store.delete_bookings_by_id(conflict_ids)
            result.replaced_ids.extend(conflict_ids)
            logger.warning(f"Replaced {conflict_ids} in room {candidate.room_id}")

        stored = self.store.insert_bookings([candidate])
        result.record_created(stored[0])
        logger.debug(f"Booked {stored[0].id} {candidate.start:%Y-%m-%d %H:%M}-{candidate.end:%H:%M}")
