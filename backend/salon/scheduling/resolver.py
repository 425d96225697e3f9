"""
Schedule resolution.

Works out the effective opening hours for a date by layering the salon's
weekly template, its closed dates and special closures, and (when a stylist
is given) the stylist's own working hours and blocked dates.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

from salon.scheduling.schedule_config import BlockedPeriod, WeeklySchedule
from salon.scheduling.occupancy import Interval
from salon.scheduling.timeutil import parse_date, parse_hhmm, weekday_name


class ScheduleMode(str, Enum):
    """Which weekly template decides a stylist's open hours."""
    SALON_WIDE = "salon_wide"
    PER_STYLIST = "per_stylist"


@dataclass(frozen=True)
class SalonSchedule:
    """Read-only snapshot of the salon-wide schedule configuration."""

    weekly: WeeklySchedule
    closed_dates: FrozenSet[date] = frozenset()
    special_closures: Tuple[BlockedPeriod, ...] = ()


@dataclass(frozen=True)
class StylistSchedule:
    """Read-only snapshot of one stylist's schedule."""

    stylist_id: str
    working_hours: Optional[WeeklySchedule] = None
    blocked_dates: Tuple[BlockedPeriod, ...] = ()


@dataclass(frozen=True)
class ResolvedHours:
    """Effective hours for one date, or the closed value."""

    is_open: bool
    opening_time: Optional[str] = None
    closing_time: Optional[str] = None
    blocked_ranges: Tuple[Interval, ...] = field(default_factory=tuple)

    @classmethod
    def closed(cls) -> "ResolvedHours":
        return cls(is_open=False)

    @property
    def opening(self) -> int:
        return parse_hhmm(self.opening_time)

    @property
    def closing(self) -> int:
        return parse_hhmm(self.closing_time)


def _partial_ranges(periods, target_date: date) -> List[Interval]:
    return [
        Interval(parse_hhmm(p.start_time), parse_hhmm(p.end_time))
        for p in periods
        if p.date == target_date and not p.is_full_day
    ]


def _has_full_day(periods, target_date: date) -> bool:
    return any(p.date == target_date and p.is_full_day for p in periods)


def resolve_open_hours(
    target_date: date,
    salon: SalonSchedule,
    stylist: Optional[StylistSchedule] = None,
    mode: ScheduleMode = ScheduleMode.SALON_WIDE,
) -> ResolvedHours:
    """
    Resolve open hours for a date.

    Order: salon closed dates and full-day closures, then the stylist's
    full-day blocks, then the weekday entry of the applicable template.
    A missing weekday entry resolves to closed.
    """
    target_date = parse_date(target_date)
    if target_date in salon.closed_dates:
        return ResolvedHours.closed()
    if _has_full_day(salon.special_closures, target_date):
        return ResolvedHours.closed()

    if stylist is not None and _has_full_day(stylist.blocked_dates, target_date):
        return ResolvedHours.closed()

    weekly = salon.weekly
    if mode == ScheduleMode.PER_STYLIST and stylist is not None and stylist.working_hours is not None:
        weekly = stylist.working_hours

    day = weekly.for_day(weekday_name(target_date))
    if day is None or not day.is_open:
        return ResolvedHours.closed()

    blocked = _partial_ranges(salon.special_closures, target_date)
    if stylist is not None:
        blocked.extend(_partial_ranges(stylist.blocked_dates, target_date))

    return ResolvedHours(
        is_open=True,
        opening_time=day.opening_time,
        closing_time=day.closing_time,
        blocked_ranges=tuple(sorted(blocked, key=lambda r: r.start)),
    )
