"""
Schedule configuration models.

Validated when settings are loaded, so the resolver only ever sees
well-formed "HH:MM" values.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from salon.scheduling.timeutil import WEEKDAYS, is_hhmm, parse_hhmm


def _check_hhmm(value: Optional[str]) -> Optional[str]:
    if value is not None and not is_hhmm(value):
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    return value


class DaySchedule(BaseModel):
    """Opening hours for one weekday."""

    model_config = ConfigDict(populate_by_name=True)

    is_open: bool = Field(False, alias="isOpen")
    opening_time: str = Field("09:00", alias="openingTime")
    closing_time: str = Field("18:00", alias="closingTime")

    @field_validator("opening_time", "closing_time")
    @classmethod
    def check_times(cls, value: str) -> str:
        return _check_hhmm(value)

    @model_validator(mode="after")
    def check_order(self) -> "DaySchedule":
        if self.is_open and parse_hhmm(self.opening_time) >= parse_hhmm(self.closing_time):
            raise ValueError("opening_time must be before closing_time")
        return self


class WeeklySchedule(BaseModel):
    """One entry per weekday. A missing day is treated as closed."""

    monday: Optional[DaySchedule] = None
    tuesday: Optional[DaySchedule] = None
    wednesday: Optional[DaySchedule] = None
    thursday: Optional[DaySchedule] = None
    friday: Optional[DaySchedule] = None
    saturday: Optional[DaySchedule] = None
    sunday: Optional[DaySchedule] = None

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_working_hours(cls, data):
        # Stylist hours were stored as {start, end, isWorking}
        if isinstance(data, dict):
            converted = {}
            for day, entry in data.items():
                key = day.lower() if isinstance(day, str) else day
                if isinstance(entry, dict) and "isWorking" in entry:
                    entry = {
                        "is_open": entry.get("isWorking", False),
                        "opening_time": entry.get("start", "09:00"),
                        "closing_time": entry.get("end", "18:00"),
                    }
                converted[key] = entry
            return converted
        return data

    def for_day(self, weekday: str) -> Optional[DaySchedule]:
        return getattr(self, weekday, None)

    @classmethod
    def uniform(cls, opening_time: str, closing_time: str, closed_days=()) -> "WeeklySchedule":
        """Same hours every day, except `closed_days`."""
        return cls(**{
            day: DaySchedule(
                is_open=day not in closed_days,
                opening_time=opening_time,
                closing_time=closing_time,
            )
            for day in WEEKDAYS
        })


class BlockedPeriod(BaseModel):
    """A full-day or partial-day block for a stylist or the whole salon."""

    model_config = ConfigDict(populate_by_name=True)

    date: date
    is_full_day: bool = Field(True, alias="isFullDay")
    start_time: Optional[str] = Field(None, alias="startTime")
    end_time: Optional[str] = Field(None, alias="endTime")
    reason: Optional[str] = Field(None, max_length=255)

    @field_validator("start_time", "end_time")
    @classmethod
    def check_times(cls, value: Optional[str]) -> Optional[str]:
        return _check_hhmm(value)

    @model_validator(mode="after")
    def check_partial_range(self) -> "BlockedPeriod":
        if not self.is_full_day:
            if not self.start_time or not self.end_time:
                raise ValueError("Partial-day blocks need start_time and end_time")
            if parse_hhmm(self.start_time) >= parse_hhmm(self.end_time):
                raise ValueError("start_time must be before end_time")
        return self


def parse_blocked_periods(raw) -> List[BlockedPeriod]:
    """Normalize stored blocked dates: plain "YYYY-MM-DD" strings or period dicts."""
    periods = []
    for item in raw or []:
        if isinstance(item, BlockedPeriod):
            periods.append(item)
        elif isinstance(item, (str, date)):
            periods.append(BlockedPeriod(date=item, is_full_day=True))
        else:
            periods.append(BlockedPeriod.model_validate(item))
    return periods


class TimeSlot(BaseModel):
    """A single grid start time."""

    time: str
    available: bool
