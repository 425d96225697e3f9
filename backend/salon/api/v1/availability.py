"""Availability endpoints."""

from datetime import date, timedelta
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from salon.api.deps import get_db
from salon.config import get_settings
from salon.schemas.schedule import (
    AvailabilityResponse,
    AvailableSlotsResponse,
    NextSlotResponse,
    TimeSlot,
)
from salon.scheduling.timeutil import salon_now
from salon.services.schedule_service import ScheduleService

settings = get_settings()
router = APIRouter()


@router.get("", response_model=AvailableSlotsResponse)
async def get_available_slots(
    date: date = Query(..., description="Target date"),
    duration: Optional[int] = Query(None, description="Requested duration in minutes"),
    service_ids: List[str] = Query([], description="Services booked back to back"),
    stylist_id: Optional[str] = Query(None, description="Null = any stylist"),
    db: AsyncSession = Depends(get_db),
):
    """
    Get bookable start times for one day.
    Does not require authentication.
    """
    service = ScheduleService(db)
    requested = await service.requested_duration(duration, service_ids)
    slots = await service.get_available_slots(
        target_date=date,
        duration=requested,
        stylist_id=stylist_id,
    )
    return AvailableSlotsResponse(date=date, stylist_id=stylist_id, duration=requested, slots=slots)


@router.get("/grid", response_model=List[TimeSlot])
async def get_time_slots(
    date: date = Query(..., description="Target date"),
    duration: Optional[int] = Query(None),
    service_ids: List[str] = Query([]),
    stylist_id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Whole slot grid for one day, each start flagged available or not."""
    service = ScheduleService(db)
    return await service.get_time_slots(
        target_date=date,
        duration=duration,
        service_ids=service_ids,
        stylist_id=stylist_id,
    )


@router.get("/range", response_model=AvailabilityResponse)
async def get_availability(
    date_from: date = Query(..., description="Start date"),
    date_to: date = Query(..., description="End date"),
    duration: Optional[int] = Query(None),
    service_ids: List[str] = Query([]),
    stylist_id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Bookable start times for every day in a date range."""
    # Validate date range
    if date_from > date_to:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="date_from must be before date_to"
        )
    
    max_range = timedelta(days=settings.MAX_AVAILABILITY_RANGE_DAYS)
    if date_to - date_from > max_range:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Date range cannot exceed {settings.MAX_AVAILABILITY_RANGE_DAYS} days"
        )
    
    # Don't allow past dates
    today = salon_now(settings.SALON_TIMEZONE).date()
    if date_from < today:
        date_from = today
    if date_to < date_from:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Date range is in the past"
        )
    
    service = ScheduleService(db)
    requested = await service.requested_duration(duration, service_ids)
    days = await service.get_availability(
        date_from=date_from,
        date_to=date_to,
        duration=requested,
        stylist_id=stylist_id,
    )
    return AvailabilityResponse(duration=requested, stylist_id=stylist_id, days=days)


@router.get("/next", response_model=NextSlotResponse)
async def find_next_available_slot(
    duration: Optional[int] = Query(None),
    service_ids: List[str] = Query([]),
    stylist_id: Optional[str] = Query(None),
    days_to_search: int = Query(None, ge=1, le=60),
    db: AsyncSession = Depends(get_db),
):
    """Earliest bookable start from today onwards."""
    service = ScheduleService(db)
    result = await service.find_next_available_slot(
        duration=duration,
        service_ids=service_ids,
        stylist_id=stylist_id,
        days_to_search=days_to_search,
    )
    
    if result is None:
        return NextSlotResponse(found=False)
    
    slot_date, slot_time = result
    return NextSlotResponse(found=True, date=slot_date, time=slot_time)
