"""Schedule and availability schemas."""

import datetime as dt
from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from salon.scheduling.resolver import ScheduleMode
from salon.scheduling.schedule_config import (
    BlockedPeriod,
    DaySchedule,
    TimeSlot,
    WeeklySchedule,
)
from salon.scheduling.timeutil import is_hhmm


class DayAvailability(BaseModel):
    """Bookable start times for a single day."""

    date: date
    slots: List[str]


class AvailableSlotsResponse(BaseModel):
    """Bookable start times response."""

    date: date
    stylist_id: Optional[str] = None
    duration: int
    slots: List[str]


class AvailabilityResponse(BaseModel):
    """Available slots over a date range."""

    duration: int
    stylist_id: Optional[str] = None
    days: List[DayAvailability]


class NextSlotResponse(BaseModel):
    """Result of a next-available-slot search."""

    found: bool
    date: Optional[dt.date] = None
    time: Optional[str] = None


class BlockSlotRequest(BaseModel):
    """Block or unblock one grid start time."""

    date: date
    time: str

    @field_validator("time")
    @classmethod
    def check_time(cls, value: str) -> str:
        if not is_hhmm(value):
            raise ValueError(f"Invalid time {value!r}, expected HH:MM")
        return value


class BlockedSlotsResponse(BaseModel):
    """All blocked slots keyed by ISO date."""

    blocked_slots: Dict[str, List[str]]


class SalonSettingsUpdate(BaseModel):
    """Partial update of the salon schedule settings."""

    weekly_schedule: Optional[WeeklySchedule] = None
    closed_dates: Optional[List[date]] = None
    special_closures: Optional[List[BlockedPeriod]] = None
    schedule_mode: Optional[ScheduleMode] = None


class SalonSettingsResponse(BaseModel):
    """Salon schedule settings."""

    weekly_schedule: WeeklySchedule
    closed_dates: List[date]
    special_closures: List[BlockedPeriod]
    blocked_slots: Dict[str, List[str]]
    schedule_mode: ScheduleMode
    timezone: str


class WorkingHoursUpdate(BaseModel):
    """Replace a stylist's own weekly hours (None clears them)."""

    working_hours: Optional[WeeklySchedule] = None


class StylistScheduleResponse(BaseModel):
    """A stylist's schedule."""

    id: str
    name: str
    working_hours: Optional[WeeklySchedule]
    blocked_dates: List[BlockedPeriod] = Field(default_factory=list)


__all__ = [
    "AvailabilityResponse",
    "AvailableSlotsResponse",
    "BlockSlotRequest",
    "BlockedPeriod",
    "BlockedSlotsResponse",
    "DayAvailability",
    "DaySchedule",
    "NextSlotResponse",
    "SalonSettingsResponse",
    "SalonSettingsUpdate",
    "StylistScheduleResponse",
    "TimeSlot",
    "WeeklySchedule",
    "WorkingHoursUpdate",
]
