"""Service layer, chat tool and worker tests against an in-memory database."""

from datetime import date, datetime

import pytest

from salon.agents.tools.schedule_tools import create_schedule_tools
from salon.models import AppointmentStatus
from salon.schemas.appointment import AppointmentCreate, AppointmentReschedule
from salon.scheduling import (
    AppointmentStateError,
    BlockedPeriod,
    BookingConflictError,
    NotFoundError,
    WeeklySchedule,
)
from salon.services import AppointmentService, ScheduleService, StylistService
from salon.workers.auto_complete import complete_past_appointments

from tests.conftest import MONDAY, TUESDAY

WEDNESDAY = date(2030, 6, 5)


def booking(**overrides):
    fields = dict(
        date=MONDAY,
        time="11:00",
        duration=60,
        customer_name="Alice Tan",
        customer_email="alice@example.com",
    )
    fields.update(overrides)
    return AppointmentCreate(**fields)


# =============================================================================
# ScheduleService
# =============================================================================

@pytest.mark.asyncio
async def test_settings_row_is_created_on_first_use(db):
    service = ScheduleService(db)
    row = await service.get_salon_settings()
    assert row.id is not None
    assert row.weekly_schedule["tuesday"]["is_open"] is False

    slots = await service.get_available_slots(MONDAY, duration=60)
    assert slots[0] == "11:00"


@pytest.mark.asyncio
async def test_resolve_footprint_keeps_service_order(db, seeded):
    service = ScheduleService(db)
    footprint = await service.resolve_footprint([seeded["haircut"].id, seeded["colour"].id])
    assert footprint.duration == 150
    assert footprint.processing_wait_time == 90
    assert footprint.processing_duration == 30

    with pytest.raises(NotFoundError):
        await service.resolve_footprint([seeded["haircut"].id, "missing"])


@pytest.mark.asyncio
async def test_find_next_available_slot_skips_closed_days(db, seeded):
    service = ScheduleService(db)
    assert await service.find_next_available_slot(duration=60, start_date=TUESDAY) == (WEDNESDAY, "11:00")

    for time in ("11:00", "11:30"):
        await service.block_time_slot(WEDNESDAY, time)
    assert await service.find_next_available_slot(duration=60, start_date=TUESDAY) == (WEDNESDAY, "12:00")


@pytest.mark.asyncio
async def test_find_next_available_slot_gives_up(db, seeded):
    service = ScheduleService(db)
    assert await service.find_next_available_slot(duration=60, start_date=TUESDAY, days_to_search=1) is None


@pytest.mark.asyncio
async def test_blocked_slots_persist(db, seeded):
    service = ScheduleService(db)
    await service.block_time_slot(MONDAY, "12:00")
    await service.block_time_slot(MONDAY, "11:30")
    blocked = await service.block_time_slot(MONDAY, "12:00")
    assert blocked == {MONDAY.isoformat(): ["11:30", "12:00"]}

    row = await service.get_salon_settings()
    assert row.blocked_slots == blocked

    assert await service.unblock_time_slot(MONDAY, "11:30") == {MONDAY.isoformat(): ["12:00"]}


@pytest.mark.asyncio
async def test_availability_range_includes_empty_days(db, seeded):
    service = ScheduleService(db)
    days = await service.get_availability(MONDAY, WEDNESDAY, duration=60)
    assert [day.date for day in days] == [MONDAY, TUESDAY, WEDNESDAY]
    assert days[1].slots == []


# =============================================================================
# AppointmentService
# =============================================================================

@pytest.mark.asyncio
async def test_create_records_footprint_and_services(db, seeded):
    service = AppointmentService(db)
    appointment = await service.create(booking(
        duration=None,
        service_ids=[seeded["haircut"].id, seeded["colour"].id],
    ))
    assert appointment.total_duration == 150
    assert appointment.processing_wait_time == 90
    assert appointment.total_price == 165
    assert [s["name"] for s in appointment.services] == ["Haircut", "Colour"]
    assert appointment.status == AppointmentStatus.SCHEDULED


@pytest.mark.asyncio
async def test_create_conflict_leaves_nothing_behind(db, seeded):
    service = AppointmentService(db)
    await service.create(booking())
    with pytest.raises(BookingConflictError):
        await service.create(booking(time="11:30"))

    appointments = await service.list_for_date(MONDAY)
    assert [a.time for a in appointments] == ["11:00"]


@pytest.mark.asyncio
async def test_unassigned_booking_blocks_every_stylist(db, seeded):
    service = AppointmentService(db)
    await service.create(booking())
    with pytest.raises(BookingConflictError):
        await service.create(booking(stylist_id=seeded["stylist"].id))


@pytest.mark.asyncio
async def test_reschedule_excludes_itself(db, seeded):
    service = AppointmentService(db)
    appointment = await service.create(booking())
    moved = await service.reschedule(appointment.id, AppointmentReschedule(date=MONDAY, time="11:30"))
    assert moved.time == "11:30"

    moved = await service.reschedule(appointment.id, AppointmentReschedule(date=WEDNESDAY, time="15:00"))
    assert (moved.date, moved.time) == (WEDNESDAY, "15:00")
    assert await service.list_for_date(MONDAY) == []


@pytest.mark.asyncio
async def test_reschedule_keeps_or_clears_stylist(db, seeded):
    service = AppointmentService(db)
    stylist_id = seeded["stylist"].id
    appointment = await service.create(booking(stylist_id=stylist_id))

    moved = await service.reschedule(appointment.id, AppointmentReschedule(date=MONDAY, time="12:00"))
    assert moved.stylist_id == stylist_id

    moved = await service.reschedule(
        appointment.id,
        AppointmentReschedule(date=MONDAY, time="12:00", stylist_id=None),
    )
    assert moved.stylist_id is None


@pytest.mark.asyncio
async def test_reschedule_rereads_status_under_lock(db, session_factory, seeded):
    service = AppointmentService(db)
    appointment = await service.create(booking())
    appointment_id = appointment.id
    assert (await service.get_by_id(appointment.id)).status == AppointmentStatus.SCHEDULED
    await db.commit()

    # Cancelled elsewhere while this session still holds the loaded row
    async with session_factory() as other:
        await AppointmentService(other).cancel(appointment.id)

    with pytest.raises(AppointmentStateError):
        await service.reschedule(appointment.id, AppointmentReschedule(date=MONDAY, time="13:00"))
    await db.rollback()

    with pytest.raises(AppointmentStateError):
        await service.complete(appointment_id)
    await db.rollback()

    assert (await service.get_by_id(appointment_id)).status == AppointmentStatus.CANCELLED


# =============================================================================
# StylistService
# =============================================================================

@pytest.mark.asyncio
async def test_stylist_blocked_periods(db, seeded):
    service = StylistService(db)
    stylist_id = seeded["stylist"].id

    await service.add_blocked_period(stylist_id, BlockedPeriod(
        date=MONDAY, is_full_day=False, start_time="12:00", end_time="13:00",
    ))
    stylist = await service.add_blocked_period(stylist_id, BlockedPeriod(
        date=WEDNESDAY, is_full_day=False, start_time="15:00", end_time="16:00",
    ))
    assert len(stylist.blocked_dates) == 2

    # A full-day block replaces partial blocks on the same date
    stylist = await service.add_blocked_period(stylist_id, BlockedPeriod(date=MONDAY))
    assert [(p["date"], p["is_full_day"]) for p in stylist.blocked_dates] == [
        (MONDAY.isoformat(), True),
        (WEDNESDAY.isoformat(), False),
    ]

    stylist = await service.remove_blocked_date(stylist_id, MONDAY)
    assert [p["date"] for p in stylist.blocked_dates] == [WEDNESDAY.isoformat()]


@pytest.mark.asyncio
async def test_stylist_working_hours(db, seeded):
    service = StylistService(db)
    stylist_id = seeded["stylist"].id

    stylist = await service.update_working_hours(stylist_id, WeeklySchedule.uniform("10:00", "14:00"))
    assert stylist.working_hours["friday"]["opening_time"] == "10:00"

    stylist = await service.update_working_hours(stylist_id, None)
    assert stylist.working_hours is None
    assert [s.id for s in await service.list_active()] == [stylist_id]


# =============================================================================
# Chat tools
# =============================================================================

@pytest.mark.asyncio
async def test_chat_tools_check_and_book(db, seeded):
    check_availability, find_next_available_slot, book_appointment = create_schedule_tools(db)

    result = await check_availability.ainvoke({"date": MONDAY.isoformat(), "duration": 60})
    assert result["slots"][0] == "11:00"

    booked = await book_appointment.ainvoke({
        "date": MONDAY.isoformat(),
        "time": "11:00",
        "customer_name": "Alice Tan",
        "customer_email": "alice@example.com",
        "service_ids": [seeded["haircut"].id],
    })
    assert booked["success"] is True
    assert booked["total_duration"] == 60

    again = await book_appointment.ainvoke({
        "date": MONDAY.isoformat(),
        "time": "11:00",
        "customer_name": "Bob Lim",
        "customer_email": "bob@example.com",
        "duration": 30,
    })
    assert again["success"] is False

    nxt = await find_next_available_slot.ainvoke({"duration": 30})
    assert nxt["found"] is True


# =============================================================================
# Auto-complete worker
# =============================================================================

@pytest.mark.asyncio
async def test_auto_complete_marks_finished_appointments(db, seeded):
    service = AppointmentService(db)
    finished = await service.create(booking())
    ongoing = await service.create(booking(time="12:00", customer_email="bob@example.com"))
    cancelled = await service.create(booking(time="14:00", customer_email="carol@example.com"))
    await service.cancel(cancelled.id)

    completed = await complete_past_appointments(db, now=datetime(2030, 6, 3, 12, 30))
    assert [a.id for a in completed] == [finished.id]

    assert (await service.get_by_id(finished.id)).status == AppointmentStatus.COMPLETED
    assert (await service.get_by_id(ongoing.id)).status == AppointmentStatus.SCHEDULED
    assert (await service.get_by_id(cancelled.id)).status == AppointmentStatus.CANCELLED
