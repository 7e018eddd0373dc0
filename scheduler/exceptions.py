"""
Error kinds raised by the booking engine and its store collaborators.

Conflicts are not errors: a skipped occurrence is a recorded outcome on the
SchedulingResult and never raised.
"""


class SchedulingError(Exception):
    pass


class BookingValidationError(SchedulingError, ValueError):
    """Request rejected before any store interaction."""
    pass


class InvalidRecurrence(BookingValidationError):
    """Recurring request without a usable 'until' boundary."""
    pass


class StoreError(SchedulingError):
    """
    A store query, insert or delete failed.

    When raised out of BookingScheduler.schedule(), ``result`` holds the
    partial SchedulingResult for everything committed before the failure.
    """

    def __init__(self, message: str = "", result=None):
        super().__init__(message)
        self.result = result


class BookingNotFound(StoreError):
    pass
