"""Admin console endpoints - salon schedule and stylist hours."""

from datetime import date
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from salon.api.deps import get_db, require_admin
from salon.models.salon_settings import SalonSettings
from salon.models.stylist import Stylist
from salon.schemas.schedule import (
    BlockedPeriod,
    BlockSlotRequest,
    BlockedSlotsResponse,
    SalonSettingsResponse,
    SalonSettingsUpdate,
    StylistScheduleResponse,
    WorkingHoursUpdate,
)
from salon.services.schedule_service import (
    ScheduleService,
    salon_schedule_from_settings,
    stylist_schedule_from_model,
)
from salon.services.stylist_service import StylistService
from salon.scheduling import ScheduleMode

router = APIRouter(dependencies=[Depends(require_admin)])


def _settings_response(row: SalonSettings) -> SalonSettingsResponse:
    schedule = salon_schedule_from_settings(row)
    return SalonSettingsResponse(
        weekly_schedule=schedule.weekly,
        closed_dates=sorted(schedule.closed_dates),
        special_closures=list(schedule.special_closures),
        blocked_slots=row.blocked_slots or {},
        schedule_mode=ScheduleMode(row.schedule_mode),
        timezone=row.timezone,
    )


def _stylist_response(stylist: Stylist) -> StylistScheduleResponse:
    schedule = stylist_schedule_from_model(stylist)
    return StylistScheduleResponse(
        id=stylist.id,
        name=stylist.name,
        working_hours=schedule.working_hours,
        blocked_dates=list(schedule.blocked_dates),
    )


# =============================================================================
# Blocked Slots
# =============================================================================

@router.post("/blocked-slots", response_model=BlockedSlotsResponse)
async def block_time_slot(
    data: BlockSlotRequest,
    db: AsyncSession = Depends(get_db),
):
    """Block a start time salon-wide. Blocking twice is a no-op."""
    service = ScheduleService(db)
    blocked = await service.block_time_slot(data.date, data.time)
    return BlockedSlotsResponse(blocked_slots=blocked)


@router.delete("/blocked-slots", response_model=BlockedSlotsResponse)
async def unblock_time_slot(
    data: BlockSlotRequest,
    db: AsyncSession = Depends(get_db),
):
    """Unblock a start time. Unblocking a free slot is a no-op."""
    service = ScheduleService(db)
    blocked = await service.unblock_time_slot(data.date, data.time)
    return BlockedSlotsResponse(blocked_slots=blocked)


# =============================================================================
# Salon Settings
# =============================================================================

@router.get("/settings", response_model=SalonSettingsResponse)
async def get_settings(db: AsyncSession = Depends(get_db)):
    service = ScheduleService(db)
    return _settings_response(await service.get_salon_settings())


@router.put("/settings", response_model=SalonSettingsResponse)
async def update_settings(
    data: SalonSettingsUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update weekly hours, closed dates, special closures or schedule mode."""
    service = ScheduleService(db)
    return _settings_response(await service.update_salon_settings(data))


# =============================================================================
# Stylist Schedules
# =============================================================================

@router.put("/stylists/{stylist_id}/working-hours", response_model=StylistScheduleResponse)
async def update_working_hours(
    stylist_id: str,
    data: WorkingHoursUpdate,
    db: AsyncSession = Depends(get_db),
):
    service = StylistService(db)
    return _stylist_response(await service.update_working_hours(stylist_id, data.working_hours))


@router.post("/stylists/{stylist_id}/blocked-dates", response_model=StylistScheduleResponse)
async def add_blocked_period(
    stylist_id: str,
    data: BlockedPeriod,
    db: AsyncSession = Depends(get_db),
):
    """Block a full or partial day for a stylist."""
    service = StylistService(db)
    return _stylist_response(await service.add_blocked_period(stylist_id, data))


@router.delete("/stylists/{stylist_id}/blocked-dates/{blocked_date}", response_model=StylistScheduleResponse)
async def remove_blocked_date(
    stylist_id: str,
    blocked_date: date,
    db: AsyncSession = Depends(get_db),
):
    service = StylistService(db)
    return _stylist_response(await service.remove_blocked_date(stylist_id, blocked_date))
