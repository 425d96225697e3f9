"""Schedule service - loads snapshots and runs the availability engine."""

import logging
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from salon.config import get_settings
from salon.models.appointment import Appointment
from salon.models.salon_settings import SalonSettings, DEFAULT_WEEKLY_SCHEDULE
from salon.models.service import Service
from salon.models.stylist import Stylist
from salon.schemas.schedule import DayAvailability, SalonSettingsUpdate
from salon.scheduling import (
    AvailabilityEngine,
    BlockedSlots,
    InvalidInputError,
    NotFoundError,
    SalonSchedule,
    ScheduleMode,
    ServiceFootprint,
    StylistSchedule,
    TimeSlot,
    WeeklySchedule,
    combine_footprints,
    parse_blocked_periods,
)
from salon.scheduling.occupancy import OCCUPYING_STATUSES
from salon.scheduling.timeutil import salon_now, validate_duration

settings = get_settings()
logger = logging.getLogger(__name__)


def salon_schedule_from_settings(row: SalonSettings) -> SalonSchedule:
    """Validated snapshot of the salon-wide configuration."""
    return SalonSchedule(
        weekly=WeeklySchedule.model_validate(row.weekly_schedule or {}),
        closed_dates=frozenset(
            date.fromisoformat(d) if isinstance(d, str) else d
            for d in (row.closed_dates or [])
        ),
        special_closures=tuple(parse_blocked_periods(row.special_closures)),
    )


def stylist_schedule_from_model(stylist: Stylist) -> StylistSchedule:
    """Validated snapshot of one stylist's schedule."""
    working_hours = None
    if stylist.working_hours:
        working_hours = WeeklySchedule.model_validate(stylist.working_hours)
    return StylistSchedule(
        stylist_id=stylist.id,
        working_hours=working_hours,
        blocked_dates=tuple(parse_blocked_periods(stylist.blocked_dates)),
    )


def service_footprint(service: Service) -> ServiceFootprint:
    return ServiceFootprint(
        duration=service.duration,
        processing_wait_time=service.processing_wait_time or 0,
        processing_duration=service.processing_duration or 0,
    )


class ScheduleService:
    """Service for schedule and availability operations."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    # =========================================================================
    # Snapshot loading
    # =========================================================================
    
    async def get_salon_settings(self, for_update: bool = False) -> SalonSettings:
        """Get the settings row, creating defaults on first use."""
        query = select(SalonSettings).order_by(SalonSettings.id).limit(1)
        if for_update:
            query = query.with_for_update()
        
        result = await self.db.execute(query)
        row = result.scalar_one_or_none()
        if row is None:
            row = SalonSettings(
                weekly_schedule=dict(DEFAULT_WEEKLY_SCHEDULE),
                closed_dates=[],
                special_closures=[],
                blocked_slots={},
                schedule_mode=ScheduleMode.SALON_WIDE.value,
                timezone=settings.SALON_TIMEZONE,
            )
            self.db.add(row)
            await self.db.commit()
            logger.info("Created default salon settings")
            if for_update:
                return await self.get_salon_settings(for_update=True)
        return row
    
    async def get_stylist(self, stylist_id: str) -> Stylist:
        result = await self.db.execute(
            select(Stylist).where(Stylist.id == stylist_id, Stylist.is_active == True)
        )
        stylist = result.scalar_one_or_none()
        if not stylist:
            raise NotFoundError(f"Stylist {stylist_id} not found")
        return stylist
    
    async def get_services(self, service_ids: Sequence[str]) -> List[Service]:
        """Active services in the order requested."""
        result = await self.db.execute(
            select(Service).where(Service.id.in_(list(service_ids)), Service.is_active == True)
        )
        by_id = {service.id: service for service in result.scalars()}
        
        missing = [service_id for service_id in service_ids if service_id not in by_id]
        if missing:
            raise NotFoundError(f"Unknown services: {', '.join(missing)}")
        return [by_id[service_id] for service_id in service_ids]
    
    async def resolve_footprint(self, service_ids: Sequence[str]) -> ServiceFootprint:
        """Aggregate footprint of services booked back to back."""
        services = await self.get_services(service_ids)
        return combine_footprints(service_footprint(service) for service in services)
    
    async def requested_duration(
        self,
        duration: Optional[int] = None,
        service_ids: Optional[Sequence[str]] = None,
    ) -> int:
        if service_ids:
            footprint = await self.resolve_footprint(service_ids)
            return footprint.duration
        if duration is None:
            raise InvalidInputError("Either duration or service_ids is required")
        return validate_duration(duration)
    
    async def build_engine(
        self,
        date_from: date,
        date_to: Optional[date] = None,
        stylist_id: Optional[str] = None,
        for_update: bool = False,
    ) -> AvailabilityEngine:
        """
        Read a fresh snapshot for the date range and wrap it in an engine.
        
        With `for_update` the settings row is locked until the transaction
        ends, which serializes concurrent booking writes.
        """
        date_to = date_to or date_from
        row = await self.get_salon_settings(for_update=for_update)
        
        stylists = {}
        if stylist_id is not None:
            stylist = await self.get_stylist(stylist_id)
            stylists[stylist.id] = stylist_schedule_from_model(stylist)
        
        query = select(Appointment).where(
            Appointment.date >= date_from,
            Appointment.date <= date_to,
            Appointment.status.in_(list(OCCUPYING_STATUSES)),
        )
        if stylist_id is not None:
            query = query.where(
                or_(Appointment.stylist_id == stylist_id, Appointment.stylist_id.is_(None))
            )
        result = await self.db.execute(query)
        appointments = [appointment.to_snapshot() for appointment in result.scalars()]
        
        return AvailabilityEngine(
            salon=salon_schedule_from_settings(row),
            blocked_slots=BlockedSlots(row.blocked_slots or {}),
            stylists=stylists,
            appointments=appointments,
            mode=ScheduleMode(row.schedule_mode or ScheduleMode.SALON_WIDE.value),
            granularity_minutes=settings.SLOT_GRANULARITY_MINUTES,
        )
    
    # =========================================================================
    # Availability
    # =========================================================================
    
    async def get_available_slots(
        self,
        target_date: date,
        duration: Optional[int] = None,
        service_ids: Optional[Sequence[str]] = None,
        stylist_id: Optional[str] = None,
    ) -> List[str]:
        """Bookable start times for one day."""
        requested = await self.requested_duration(duration, service_ids)
        engine = await self.build_engine(target_date, stylist_id=stylist_id)
        return engine.get_available_slots(target_date, requested, stylist_id)
    
    async def get_time_slots(
        self,
        target_date: date,
        duration: Optional[int] = None,
        service_ids: Optional[Sequence[str]] = None,
        stylist_id: Optional[str] = None,
    ) -> List[TimeSlot]:
        """Whole grid for one day with availability flags."""
        requested = await self.requested_duration(duration, service_ids)
        engine = await self.build_engine(target_date, stylist_id=stylist_id)
        return engine.get_time_slots(target_date, requested, stylist_id)
    
    async def get_availability(
        self,
        date_from: date,
        date_to: date,
        duration: Optional[int] = None,
        service_ids: Optional[Sequence[str]] = None,
        stylist_id: Optional[str] = None,
    ) -> List[DayAvailability]:
        """
        Get bookable start times for a date range.
        Returns one entry per day, including days with no slots.
        """
        if date_from > date_to:
            raise InvalidInputError("date_from must be before date_to")
        
        requested = await self.requested_duration(duration, service_ids)
        engine = await self.build_engine(date_from, date_to, stylist_id=stylist_id)
        
        availability = []
        current_date = date_from
        while current_date <= date_to:
            availability.append(DayAvailability(
                date=current_date,
                slots=engine.get_available_slots(current_date, requested, stylist_id),
            ))
            current_date += timedelta(days=1)
        
        return availability
    
    async def find_next_available_slot(
        self,
        duration: Optional[int] = None,
        service_ids: Optional[Sequence[str]] = None,
        stylist_id: Optional[str] = None,
        days_to_search: Optional[int] = None,
        start_date: Optional[date] = None,
    ) -> Optional[Tuple[date, str]]:
        """
        Earliest bookable (date, time) from `start_date` onwards.
        Start times already past on the salon's today are skipped.
        """
        days_to_search = days_to_search or settings.NEXT_SLOT_SEARCH_DAYS
        now = salon_now(settings.SALON_TIMEZONE)
        today = now.date()
        start_date = max(start_date or today, today)
        end_date = start_date + timedelta(days=days_to_search - 1)
        
        requested = await self.requested_duration(duration, service_ids)
        engine = await self.build_engine(start_date, end_date, stylist_id=stylist_id)
        
        current_date = start_date
        while current_date <= end_date:
            for slot in engine.get_available_slots(current_date, requested, stylist_id):
                if current_date == today and slot <= now.strftime("%H:%M"):
                    continue
                return current_date, slot
            current_date += timedelta(days=1)
        
        return None
    
    # =========================================================================
    # Blocked slots
    # =========================================================================
    
    async def block_time_slot(self, target_date: date, time: str) -> Dict[str, List[str]]:
        """Block a start time salon-wide. Booked slots may be blocked too."""
        return await self._update_blocked_slots(target_date, time, block=True)
    
    async def unblock_time_slot(self, target_date: date, time: str) -> Dict[str, List[str]]:
        return await self._update_blocked_slots(target_date, time, block=False)
    
    async def _update_blocked_slots(self, target_date: date, time: str, block: bool) -> Dict[str, List[str]]:
        row = await self.get_salon_settings(for_update=True)
        engine = AvailabilityEngine(
            salon=salon_schedule_from_settings(row),
            blocked_slots=BlockedSlots(row.blocked_slots or {}),
            granularity_minutes=settings.SLOT_GRANULARITY_MINUTES,
        )
        
        if block:
            engine.block_time_slot(target_date, time)
        else:
            engine.unblock_time_slot(target_date, time)
        
        # JSON columns only notice reassignment
        row.blocked_slots = engine.blocked_slots.to_dict()
        await self.db.commit()
        
        logger.info("%s slot %s %s", "Blocked" if block else "Unblocked", target_date, time)
        return row.blocked_slots
    
    # =========================================================================
    # Settings
    # =========================================================================
    
    async def update_salon_settings(self, data: SalonSettingsUpdate) -> SalonSettings:
        """Apply a partial settings update. Values were validated by the schema."""
        row = await self.get_salon_settings(for_update=True)
        
        if data.weekly_schedule is not None:
            row.weekly_schedule = data.weekly_schedule.model_dump(mode="json", exclude_none=True)
        if data.closed_dates is not None:
            row.closed_dates = sorted({d.isoformat() for d in data.closed_dates})
        if data.special_closures is not None:
            row.special_closures = [
                period.model_dump(mode="json", exclude_none=True)
                for period in data.special_closures
            ]
        if data.schedule_mode is not None:
            row.schedule_mode = ScheduleMode(data.schedule_mode).value
        
        await self.db.commit()
        await self.db.refresh(row)
        logger.info("Salon settings updated")
        return row
