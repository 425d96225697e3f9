"""
Availability engine.

Filters the day's slot grid down to the start times that can actually be
booked, given the schedule, explicit blocked slots and existing bookings.
The engine holds no I/O; callers hand it fresh snapshots per request.
"""

import logging
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Union

from salon.scheduling.schedule_config import TimeSlot
from salon.scheduling.errors import InvalidInputError
from salon.scheduling.grid import generate_grid
from salon.scheduling.occupancy import (
    AppointmentSnapshot,
    Interval,
    OccupiedInterval,
    build_occupancy,
)
from salon.scheduling.resolver import (
    ResolvedHours,
    SalonSchedule,
    ScheduleMode,
    StylistSchedule,
    resolve_open_hours,
)
from salon.scheduling.timeutil import (
    date_key,
    format_hhmm,
    is_hhmm,
    parse_date,
    parse_hhmm,
    validate_duration,
)

logger = logging.getLogger(__name__)

DEFAULT_GRANULARITY_MINUTES = 30


class BlockedSlots:
    """Salon-wide blocked grid starts keyed by ISO date."""

    def __init__(self, slots: Optional[Mapping[str, Iterable[str]]] = None):
        self._slots: Dict[str, Set[str]] = {}
        for key, times in (slots or {}).items():
            for time in times:
                self.add(key, time)

    def add(self, target_date: Union[date, str], time: str) -> None:
        key, time = self._validate(target_date, time)
        self._slots.setdefault(key, set()).add(time)

    def remove(self, target_date: Union[date, str], time: str) -> None:
        key, time = self._validate(target_date, time)
        times = self._slots.get(key)
        if not times:
            return
        times.discard(time)
        if not times:
            del self._slots[key]

    def for_date(self, target_date: Union[date, str]) -> Set[str]:
        return set(self._slots.get(date_key(target_date), ()))

    def to_dict(self) -> Dict[str, List[str]]:
        """JSON-friendly copy with sorted times."""
        return {key: sorted(times) for key, times in sorted(self._slots.items())}

    @staticmethod
    def _validate(target_date, time):
        if not is_hhmm(time):
            raise InvalidInputError(f"Invalid time {time!r}, expected HH:MM")
        return date_key(target_date), time

    def __contains__(self, item) -> bool:
        target_date, time = item
        return time in self._slots.get(date_key(target_date), ())

    def __eq__(self, other) -> bool:
        return isinstance(other, BlockedSlots) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"<BlockedSlots {self.to_dict()}>"


class AvailabilityEngine:
    """Computes bookable start times over one snapshot of salon data."""

    def __init__(
        self,
        salon: SalonSchedule,
        blocked_slots: Optional[BlockedSlots] = None,
        stylists: Optional[Mapping[str, StylistSchedule]] = None,
        appointments: Sequence[AppointmentSnapshot] = (),
        mode: ScheduleMode = ScheduleMode.SALON_WIDE,
        granularity_minutes: int = DEFAULT_GRANULARITY_MINUTES,
    ):
        if granularity_minutes <= 0:
            raise InvalidInputError("Slot granularity must be positive")
        self.salon = salon
        self.blocked_slots = blocked_slots if blocked_slots is not None else BlockedSlots()
        self.stylists = dict(stylists or {})
        self.appointments = list(appointments)
        self.mode = ScheduleMode(mode)
        self.granularity_minutes = granularity_minutes

    # =========================================================================
    # Queries
    # =========================================================================

    def resolve_hours(self, target_date: Union[date, str], stylist_id: Optional[str] = None) -> ResolvedHours:
        target_date = parse_date(target_date)
        stylist = self.stylists.get(stylist_id) if stylist_id is not None else None
        if stylist is None and stylist_id is not None:
            stylist = StylistSchedule(stylist_id=stylist_id)
        return resolve_open_hours(target_date, self.salon, stylist, self.mode)

    def get_available_slots(
        self,
        target_date: Union[date, str],
        requested_duration: int,
        stylist_id: Optional[str] = None,
    ) -> List[str]:
        """Bookable start times in chronological order."""
        return [
            slot.time
            for slot in self.get_time_slots(target_date, requested_duration, stylist_id)
            if slot.available
        ]

    def get_time_slots(
        self,
        target_date: Union[date, str],
        requested_duration: int,
        stylist_id: Optional[str] = None,
    ) -> List[TimeSlot]:
        """The full grid for the day with an availability flag per start."""
        target_date = parse_date(target_date)
        validate_duration(requested_duration)

        hours = self.resolve_hours(target_date, stylist_id)
        if not hours.is_open:
            logger.debug("Closed on %s for stylist %s", target_date, stylist_id)
            return []

        grid = generate_grid(hours.opening_time, hours.closing_time, self.granularity_minutes)
        occupancy = build_occupancy(self.appointments, target_date, stylist_id)
        blocked_starts = self.blocked_slots.for_date(target_date)

        return [
            TimeSlot(
                time=start,
                available=self._accepts(
                    parse_hhmm(start), requested_duration, hours, occupancy, blocked_starts
                ),
            )
            for start in grid
        ]

    def is_bookable(
        self,
        target_date: Union[date, str],
        time: str,
        requested_duration: int,
        stylist_id: Optional[str] = None,
        exclude_appointment_id: Optional[str] = None,
    ) -> bool:
        """
        Overlap test for a single start time.

        Used by the booking write path as the final check; the start must
        also sit on the grid. `exclude_appointment_id` skips the appointment
        being rescheduled.
        """
        target_date = parse_date(target_date)
        validate_duration(requested_duration)
        start = parse_hhmm(time)

        hours = self.resolve_hours(target_date, stylist_id)
        if not hours.is_open:
            return False
        if (start - hours.opening) % self.granularity_minutes != 0 or start < hours.opening:
            return False

        occupancy = build_occupancy(
            self.appointments, target_date, stylist_id, exclude_appointment_id=exclude_appointment_id
        )
        return self._accepts(
            start, requested_duration, hours, occupancy, self.blocked_slots.for_date(target_date)
        )

    # =========================================================================
    # Blocked slot mutators
    # =========================================================================

    def block_time_slot(self, target_date: Union[date, str], time: str) -> None:
        """Block a grid start salon-wide. Existing bookings are not checked."""
        self.blocked_slots.add(target_date, time)

    def unblock_time_slot(self, target_date: Union[date, str], time: str) -> None:
        self.blocked_slots.remove(target_date, time)

    # =========================================================================
    # Internals
    # =========================================================================

    @staticmethod
    def _accepts(
        start: int,
        duration: int,
        hours: ResolvedHours,
        occupancy: List[OccupiedInterval],
        blocked_starts: Set[str],
    ) -> bool:
        candidate = Interval(start, start + duration)

        if format_hhmm(start) in blocked_starts:
            return False
        if candidate.end > hours.closing:
            return False
        for blocked in hours.blocked_ranges:
            if blocked.overlaps(candidate):
                return False

        # The candidate's own processing gap never excuses an overlap
        for interval in occupancy:
            if interval.start >= candidate.end:
                break
            if interval.blocks(candidate):
                return False
        return True

