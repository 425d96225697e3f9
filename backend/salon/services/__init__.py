"""Business logic services."""

from salon.services.schedule_service import ScheduleService
from salon.services.appointment_service import AppointmentService
from salon.services.stylist_service import StylistService

__all__ = [
    "ScheduleService",
    "AppointmentService",
    "StylistService",
]
