"""SQLAlchemy models."""

from salon.models.salon_settings import SalonSettings
from salon.models.stylist import Stylist
from salon.models.service import Service
from salon.models.appointment import Appointment, AppointmentStatus, BookingSource

__all__ = [
    "SalonSettings",
    "Stylist",
    "Service",
    "Appointment",
    "AppointmentStatus",
    "BookingSource",
]
