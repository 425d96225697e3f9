"""Tests for time helpers, the slot grid, schedule resolution and occupancy."""

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from salon.scheduling import (
    AppointmentSnapshot,
    AppointmentStatus,
    BlockedPeriod,
    InvalidInputError,
    Interval,
    SalonSchedule,
    ScheduleMode,
    ServiceFootprint,
    StylistSchedule,
    WeeklySchedule,
    build_occupancy,
    combine_footprints,
    generate_grid,
    resolve_open_hours,
)
from salon.scheduling.schedule_config import DaySchedule
from salon.scheduling.timeutil import format_hhmm, parse_date, parse_hhmm, weekday_name

MONDAY = date(2030, 6, 3)
TUESDAY = date(2030, 6, 4)


def weekly(opening="09:00", closing="18:00", closed_days=()):
    return WeeklySchedule.uniform(opening, closing, closed_days=closed_days)


# =============================================================================
# Time helpers
# =============================================================================

def test_hhmm_conversions():
    assert parse_hhmm("00:00") == 0
    assert parse_hhmm("09:30") == 570
    assert parse_hhmm("23:59") == 1439
    assert format_hhmm(570) == "09:30"


@pytest.mark.parametrize("value", ["9:30", "24:00", "12:60", "noon", "", None])
def test_parse_hhmm_rejects_malformed(value):
    with pytest.raises(InvalidInputError):
        parse_hhmm(value)


def test_parse_date():
    assert parse_date("2030-06-03") == MONDAY
    assert parse_date(MONDAY) is MONDAY
    parsed = parse_date(datetime(2030, 6, 3, 14, 30))
    assert parsed == MONDAY
    assert type(parsed) is date
    with pytest.raises(InvalidInputError):
        parse_date("03/06/2030")


def test_weekday_name():
    assert weekday_name(MONDAY) == "monday"
    assert weekday_name(TUESDAY) == "tuesday"


# =============================================================================
# Grid
# =============================================================================

def test_grid_steps_from_opening_until_closing():
    assert generate_grid("09:00", "11:00", 30) == ["09:00", "09:30", "10:00", "10:30"]


def test_grid_keeps_starts_that_would_cross_closing():
    assert generate_grid("09:00", "10:00", 45) == ["09:00", "09:45"]


def test_grid_rejects_non_positive_granularity():
    with pytest.raises(InvalidInputError):
        generate_grid("09:00", "18:00", 0)


# =============================================================================
# Schedule config validation
# =============================================================================

def test_day_schedule_accepts_camel_case_keys():
    day = DaySchedule.model_validate({"isOpen": True, "openingTime": "10:00", "closingTime": "17:00"})
    assert day.is_open
    assert day.opening_time == "10:00"


def test_day_schedule_rejects_inverted_hours():
    with pytest.raises(ValidationError):
        DaySchedule(is_open=True, opening_time="18:00", closing_time="09:00")


def test_day_schedule_rejects_malformed_time():
    with pytest.raises(ValidationError):
        DaySchedule(is_open=True, opening_time="9am", closing_time="18:00")


def test_weekly_schedule_converts_legacy_stylist_hours():
    schedule = WeeklySchedule.model_validate({
        "Monday": {"start": "12:00", "end": "16:00", "isWorking": True},
        "Friday": {"start": "09:00", "end": "17:00", "isWorking": False},
    })
    assert schedule.monday.opening_time == "12:00"
    assert schedule.monday.is_open
    assert not schedule.friday.is_open


def test_partial_blocked_period_needs_a_range():
    with pytest.raises(ValidationError):
        BlockedPeriod(date=MONDAY, is_full_day=False, start_time="14:00")


# =============================================================================
# Resolver
# =============================================================================

def test_resolve_returns_weekday_hours():
    hours = resolve_open_hours(MONDAY, SalonSchedule(weekly=weekly()))
    assert hours.is_open
    assert (hours.opening_time, hours.closing_time) == ("09:00", "18:00")
    assert hours.blocked_ranges == ()


def test_closed_date_wins_over_weekday():
    salon = SalonSchedule(weekly=weekly(), closed_dates=frozenset({MONDAY}))
    assert not resolve_open_hours(MONDAY, salon).is_open


def test_closed_weekday_and_missing_weekday():
    salon = SalonSchedule(weekly=weekly(closed_days=("tuesday",)))
    assert not resolve_open_hours(TUESDAY, salon).is_open

    sparse = SalonSchedule(weekly=WeeklySchedule(monday=DaySchedule(is_open=True)))
    assert not resolve_open_hours(TUESDAY, sparse).is_open


def test_full_day_special_closure_closes_salon():
    salon = SalonSchedule(
        weekly=weekly(),
        special_closures=(BlockedPeriod(date=MONDAY, reason="Staff training"),),
    )
    assert not resolve_open_hours(MONDAY, salon).is_open


def test_stylist_full_day_block():
    salon = SalonSchedule(weekly=weekly())
    stylist = StylistSchedule("s1", blocked_dates=(BlockedPeriod(date=MONDAY),))
    assert not resolve_open_hours(MONDAY, salon, stylist).is_open
    assert resolve_open_hours(MONDAY, salon).is_open


def test_stylist_hours_only_apply_in_per_stylist_mode():
    salon = SalonSchedule(weekly=weekly())
    stylist = StylistSchedule("s1", working_hours=weekly("12:00", "16:00"))

    salon_wide = resolve_open_hours(MONDAY, salon, stylist, ScheduleMode.SALON_WIDE)
    per_stylist = resolve_open_hours(MONDAY, salon, stylist, ScheduleMode.PER_STYLIST)

    assert salon_wide.opening_time == "09:00"
    assert (per_stylist.opening_time, per_stylist.closing_time) == ("12:00", "16:00")


def test_partial_blocks_become_blocked_ranges():
    salon = SalonSchedule(
        weekly=weekly(),
        special_closures=(
            BlockedPeriod(date=MONDAY, is_full_day=False, start_time="15:00", end_time="16:00"),
        ),
    )
    stylist = StylistSchedule("s1", blocked_dates=(
        BlockedPeriod(date=MONDAY, is_full_day=False, start_time="10:00", end_time="11:00"),
    ))
    hours = resolve_open_hours(MONDAY, salon, stylist)
    assert hours.blocked_ranges == (Interval(600, 660), Interval(900, 960))


# =============================================================================
# Occupancy
# =============================================================================

def test_occupancy_filters_date_status_and_stylist():
    appointments = [
        AppointmentSnapshot(MONDAY, "13:00", 60, stylist_id="s1", id="a"),
        AppointmentSnapshot(MONDAY, "10:00", 30, stylist_id="s2", id="b"),
        AppointmentSnapshot(MONDAY, "11:00", 30, stylist_id=None, id="c"),
        AppointmentSnapshot(MONDAY, "12:00", 30, stylist_id="s1", status=AppointmentStatus.CANCELLED, id="d"),
        AppointmentSnapshot(MONDAY, "12:30", 30, stylist_id="s1", status=AppointmentStatus.NO_SHOW, id="e"),
        AppointmentSnapshot(MONDAY, "09:00", 30, stylist_id="s1", status=AppointmentStatus.COMPLETED, id="f"),
        AppointmentSnapshot(TUESDAY, "10:00", 30, stylist_id="s1", id="g"),
    ]

    for_s1 = build_occupancy(appointments, MONDAY, "s1")
    assert [i.appointment_id for i in for_s1] == ["f", "c", "a"]

    everyone = build_occupancy(appointments, MONDAY)
    assert [i.appointment_id for i in everyone] == ["f", "b", "c", "a"]


def test_occupancy_free_window_and_exclusion():
    appointments = [
        AppointmentSnapshot(MONDAY, "10:00", 90, processing_wait_time=30, processing_duration=30, id="a"),
        AppointmentSnapshot(MONDAY, "14:00", 60, id="b"),
    ]
    intervals = build_occupancy(appointments, MONDAY)
    assert intervals[0].full == Interval(600, 690)
    assert intervals[0].free == Interval(630, 660)
    assert intervals[1].free is None

    remaining = build_occupancy(appointments, MONDAY, exclude_appointment_id="a")
    assert [i.appointment_id for i in remaining] == ["b"]


def test_occupied_interval_blocks_only_active_overlap():
    [interval] = build_occupancy(
        [AppointmentSnapshot(MONDAY, "10:00", 90, processing_wait_time=30, processing_duration=30)],
        MONDAY,
    )
    assert not interval.blocks(Interval(630, 660))
    assert interval.blocks(Interval(600, 630))
    assert interval.blocks(Interval(660, 690))
    assert interval.blocks(Interval(630, 690))
    assert not interval.blocks(Interval(690, 720))


# =============================================================================
# Footprints
# =============================================================================

def test_combine_footprints_shifts_gap_of_later_service():
    footprint = combine_footprints([
        ServiceFootprint(duration=30),
        ServiceFootprint(duration=90, processing_wait_time=30, processing_duration=30),
        ServiceFootprint(duration=60, processing_wait_time=10, processing_duration=20),
    ])
    assert footprint.duration == 180
    assert footprint.processing_wait_time == 60
    assert footprint.processing_duration == 30


def test_footprint_gap_must_fit():
    with pytest.raises(InvalidInputError):
        ServiceFootprint(duration=60, processing_wait_time=40, processing_duration=30)


def test_combine_footprints_requires_positive_total():
    with pytest.raises(InvalidInputError):
        combine_footprints([])
