"""Pydantic schemas for API request/response validation."""

from salon.schemas.appointment import (
    AppointmentCreate,
    AppointmentReschedule,
    AppointmentResponse,
)
from salon.schemas.schedule import (
    AvailabilityResponse,
    AvailableSlotsResponse,
    BlockSlotRequest,
    BlockedSlotsResponse,
    NextSlotResponse,
    SalonSettingsResponse,
    SalonSettingsUpdate,
    StylistScheduleResponse,
    TimeSlot,
    WorkingHoursUpdate,
)

__all__ = [
    # Appointment
    "AppointmentCreate",
    "AppointmentReschedule",
    "AppointmentResponse",
    # Schedule
    "AvailabilityResponse",
    "AvailableSlotsResponse",
    "BlockSlotRequest",
    "BlockedSlotsResponse",
    "NextSlotResponse",
    "SalonSettingsResponse",
    "SalonSettingsUpdate",
    "StylistScheduleResponse",
    "TimeSlot",
    "WorkingHoursUpdate",
]
