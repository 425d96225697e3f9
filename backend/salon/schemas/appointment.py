"""Appointment schemas."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from salon.models.appointment import AppointmentStatus, BookingSource
from salon.scheduling.timeutil import is_hhmm


def _check_time(value: str) -> str:
    if not is_hhmm(value):
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    return value


class AppointmentCreate(BaseModel):
    """Book an appointment."""
    
    date: date
    time: str
    service_ids: List[str] = Field(default_factory=list)
    duration: Optional[int] = Field(None, gt=0)  # Category bookings carry an estimate instead of services
    stylist_id: Optional[str] = None  # Null = no preference
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: EmailStr
    booking_source: BookingSource = BookingSource.WEB
    
    @field_validator("time")
    @classmethod
    def check_time(cls, value: str) -> str:
        return _check_time(value)
    
    @model_validator(mode="after")
    def check_services_or_duration(self) -> "AppointmentCreate":
        if not self.service_ids and not self.duration:
            raise ValueError("Either service_ids or duration must be provided")
        return self


class AppointmentReschedule(BaseModel):
    """
    Move an appointment to a new date/time.
    Leaving out stylist_id keeps the current stylist; null means any stylist.
    """
    
    date: date
    time: str
    stylist_id: Optional[str] = None
    
    @field_validator("time")
    @classmethod
    def check_time(cls, value: str) -> str:
        return _check_time(value)


class AppointmentResponse(BaseModel):
    """Appointment response."""
    
    id: str
    date: date
    time: str
    stylist_id: Optional[str]
    total_duration: int
    processing_wait_time: int
    processing_duration: int
    total_price: int
    customer_name: str
    customer_email: str
    status: AppointmentStatus
    booking_source: BookingSource
    created_at: Optional[datetime] = None
    
    class Config:
        from_attributes = True
