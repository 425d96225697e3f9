"""Stylist service - stylist schedules."""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from salon.models.stylist import Stylist
from salon.scheduling import BlockedPeriod, NotFoundError, WeeklySchedule, parse_blocked_periods

logger = logging.getLogger(__name__)


class StylistService:
    """Service for stylist schedule operations."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def get_by_id(self, stylist_id: str) -> Stylist:
        result = await self.db.execute(select(Stylist).where(Stylist.id == stylist_id))
        stylist = result.scalar_one_or_none()
        if not stylist:
            raise NotFoundError(f"Stylist {stylist_id} not found")
        return stylist
    
    async def list_active(self) -> List[Stylist]:
        result = await self.db.execute(
            select(Stylist).where(Stylist.is_active == True).order_by(Stylist.name)
        )
        return list(result.scalars())
    
    async def update_working_hours(self, stylist_id: str, working_hours: Optional[WeeklySchedule]) -> Stylist:
        """Replace the stylist's own weekly hours. None means follow the salon."""
        stylist = await self.get_by_id(stylist_id)
        stylist.working_hours = (
            working_hours.model_dump(mode="json", exclude_none=True) if working_hours else None
        )
        await self.db.commit()
        await self.db.refresh(stylist)
        logger.info("Updated working hours for stylist %s", stylist_id)
        return stylist
    
    async def add_blocked_period(self, stylist_id: str, period: BlockedPeriod) -> Stylist:
        """Add a blocked period. A full-day block replaces any others on that date."""
        stylist = await self.get_by_id(stylist_id)
        periods = parse_blocked_periods(stylist.blocked_dates)
        if period.is_full_day:
            periods = [p for p in periods if p.date != period.date]
        periods.append(period)
        periods.sort(key=lambda p: (p.date, p.start_time or ""))
        
        stylist.blocked_dates = [p.model_dump(mode="json", exclude_none=True) for p in periods]
        await self.db.commit()
        await self.db.refresh(stylist)
        logger.info("Blocked %s for stylist %s", period.date, stylist_id)
        return stylist
    
    async def remove_blocked_date(self, stylist_id: str, target_date: date) -> Stylist:
        """Remove every blocked period on a date."""
        stylist = await self.get_by_id(stylist_id)
        periods = [p for p in parse_blocked_periods(stylist.blocked_dates) if p.date != target_date]
        
        stylist.blocked_dates = [p.model_dump(mode="json", exclude_none=True) for p in periods]
        await self.db.commit()
        await self.db.refresh(stylist)
        return stylist
