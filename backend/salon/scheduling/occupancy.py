"""
Occupancy index.

Turns the day's appointments into busy intervals. An interval may carry a
free window (the processing gap, e.g. colour developing) during which the
stylist can take a different client.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, List, Optional

from salon.scheduling.timeutil import parse_date, parse_hhmm


class AppointmentStatus(str, Enum):
    """Appointment status enumeration."""
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


# Completed appointments on the target day still held the chair
OCCUPYING_STATUSES = frozenset({AppointmentStatus.SCHEDULED, AppointmentStatus.COMPLETED})


@dataclass(frozen=True)
class Interval:
    """Half-open minute range [start, end)."""

    start: int
    end: int

    @property
    def duration(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "Interval") -> bool:
        return self.start < other.end and other.start < self.end

    def contains(self, other: "Interval") -> bool:
        return self.start <= other.start and other.end <= self.end

    def intersection(self, other: "Interval") -> Optional["Interval"]:
        start = max(self.start, other.start)
        end = min(self.end, other.end)
        if start >= end:
            return None
        return Interval(start, end)


@dataclass(frozen=True)
class OccupiedInterval:
    """Busy interval with an optional free window inside it."""

    full: Interval
    free: Optional[Interval] = None
    appointment_id: Optional[str] = None

    @property
    def start(self) -> int:
        return self.full.start

    @property
    def end(self) -> int:
        return self.full.end

    def blocks(self, candidate: Interval) -> bool:
        """True if `candidate` touches the active (non-free) part of this interval."""
        overlap = self.full.intersection(candidate)
        if overlap is None:
            return False
        if self.free is not None and self.free.contains(overlap):
            return False
        return True


@dataclass(frozen=True)
class AppointmentSnapshot:
    """The parts of an appointment the engine needs."""

    date: date
    time: str
    total_duration: int
    stylist_id: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    processing_wait_time: int = 0
    processing_duration: int = 0
    id: Optional[str] = None

    @property
    def occupies(self) -> bool:
        return AppointmentStatus(self.status) in OCCUPYING_STATUSES


def occupied_interval(appointment: AppointmentSnapshot) -> OccupiedInterval:
    """Footprint of one appointment."""
    start = parse_hhmm(appointment.time)
    full = Interval(start, start + appointment.total_duration)

    free = None
    if appointment.processing_duration > 0:
        gap_start = start + appointment.processing_wait_time
        free = full.intersection(Interval(gap_start, gap_start + appointment.processing_duration))

    return OccupiedInterval(full=full, free=free, appointment_id=appointment.id)


def _matches_stylist(appointment: AppointmentSnapshot, stylist_id: Optional[str]) -> bool:
    if stylist_id is None:
        return True
    # Unassigned bookings may still land on any stylist
    return appointment.stylist_id is None or appointment.stylist_id == stylist_id


def build_occupancy(
    appointments: Iterable[AppointmentSnapshot],
    target_date: date,
    stylist_id: Optional[str] = None,
    exclude_appointment_id: Optional[str] = None,
) -> List[OccupiedInterval]:
    """
    Busy intervals for a date, ordered by start time.

    Without a stylist every occupying appointment of the day counts. With a
    stylist, that stylist's appointments and all unassigned ones count.
    Overlaps in the input are reported as-is.
    """
    target_date = parse_date(target_date)
    intervals = []
    for appointment in appointments:
        if appointment.date != target_date or not appointment.occupies:
            continue
        if exclude_appointment_id is not None and appointment.id == exclude_appointment_id:
            continue
        if not _matches_stylist(appointment, stylist_id):
            continue
        if appointment.total_duration <= 0:
            continue
        intervals.append(occupied_interval(appointment))

    intervals.sort(key=lambda interval: (interval.start, interval.end))
    return intervals
