"""Scheduling errors."""


class SchedulingError(Exception):
    """Base class for scheduling errors surfaced to callers."""


class InvalidInputError(SchedulingError, ValueError):
    """Malformed date/time or a non-positive duration."""


class NotFoundError(SchedulingError):
    """A referenced stylist, service or appointment does not exist."""


class BookingConflictError(SchedulingError):
    """The requested slot was taken between the availability read and the write."""

    def __init__(self, message: str = "Slot no longer available, please choose another"):
        super().__init__(message)


class AppointmentStateError(SchedulingError):
    """Status transition not allowed from the appointment's current status."""
