"""
Auto-complete worker.
Marks scheduled appointments whose end time has passed as completed.
Runs every 30 minutes.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import List

from sqlalchemy import select

from salon.config import get_settings
from salon.database import AsyncSessionLocal
from salon.models.appointment import Appointment, AppointmentStatus
from salon.scheduling.timeutil import salon_now

settings = get_settings()
logger = logging.getLogger(__name__)


def appointment_end(appointment: Appointment) -> datetime:
    """Naive end datetime in salon time."""
    start = datetime.combine(
        appointment.date,
        datetime.strptime(appointment.time, "%H:%M").time(),
    )
    return start + timedelta(minutes=appointment.total_duration)


async def complete_past_appointments(db, now: datetime = None) -> List[Appointment]:
    """Complete every scheduled appointment that ended before `now` (salon time)."""
    now = now or salon_now(settings.SALON_TIMEZONE)
    
    result = await db.execute(
        select(Appointment).where(
            Appointment.status == AppointmentStatus.SCHEDULED,
            Appointment.date <= now.date(),
        )
    )
    
    completed = []
    for appointment in result.scalars():
        if appointment_end(appointment) <= now:
            appointment.status = AppointmentStatus.COMPLETED
            appointment.completed_at = datetime.utcnow()
            completed.append(appointment)
    
    if completed:
        await db.commit()
    return completed


async def run_auto_complete() -> List[Appointment]:
    """Main auto-complete job."""
    async with AsyncSessionLocal() as db:
        completed = await complete_past_appointments(db)
        for appointment in completed:
            logger.info("Auto-completed appointment %s (%s %s)", appointment.id, appointment.date, appointment.time)
        return completed


# Entry point for running as standalone script
if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    completed = asyncio.run(run_auto_complete())
    logger.info("Total auto-completed: %d", len(completed))
