"""
Availability engine.

- Schedule resolution (resolver.py)
- Slot grid generation (grid.py)
- Occupancy index with processing gaps (occupancy.py)
- Service footprints (footprint.py)
- Orchestration and blocked slots (engine.py)
"""

from salon.scheduling.engine import AvailabilityEngine, BlockedSlots
from salon.scheduling.errors import (
    AppointmentStateError,
    BookingConflictError,
    InvalidInputError,
    NotFoundError,
    SchedulingError,
)
from salon.scheduling.footprint import ServiceFootprint, combine_footprints
from salon.scheduling.grid import generate_grid
from salon.scheduling.occupancy import (
    AppointmentSnapshot,
    AppointmentStatus,
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
from salon.scheduling.schedule_config import (
    BlockedPeriod,
    DaySchedule,
    TimeSlot,
    WeeklySchedule,
    parse_blocked_periods,
)

__all__ = [
    "AvailabilityEngine",
    "BlockedSlots",
    "AppointmentStateError",
    "BookingConflictError",
    "InvalidInputError",
    "NotFoundError",
    "SchedulingError",
    "ServiceFootprint",
    "combine_footprints",
    "generate_grid",
    "AppointmentSnapshot",
    "AppointmentStatus",
    "Interval",
    "OccupiedInterval",
    "build_occupancy",
    "ResolvedHours",
    "SalonSchedule",
    "ScheduleMode",
    "StylistSchedule",
    "resolve_open_hours",
    "BlockedPeriod",
    "DaySchedule",
    "TimeSlot",
    "WeeklySchedule",
    "parse_blocked_periods",
]
