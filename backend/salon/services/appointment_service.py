"""Appointment service - the booking write path."""

import logging
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from salon.models.appointment import Appointment, AppointmentStatus
from salon.schemas.appointment import AppointmentCreate, AppointmentReschedule
from salon.scheduling import (
    AppointmentStateError,
    BookingConflictError,
    NotFoundError,
    ServiceFootprint,
    combine_footprints,
)
from salon.services.schedule_service import ScheduleService, service_footprint

logger = logging.getLogger(__name__)


class AppointmentService:
    """Service for appointment operations."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
        self.schedule = ScheduleService(db)
    
    async def get_by_id(self, appointment_id: str, for_update: bool = False) -> Appointment:
        """Get an appointment. With `for_update` the row is locked and re-read."""
        query = select(Appointment).where(Appointment.id == appointment_id)
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.db.execute(query)
        appointment = result.scalar_one_or_none()
        if not appointment:
            raise NotFoundError(f"Appointment {appointment_id} not found")
        return appointment
    
    async def list_for_date(self, target_date: date, stylist_id: Optional[str] = None) -> List[Appointment]:
        query = select(Appointment).where(Appointment.date == target_date)
        if stylist_id:
            query = query.where(Appointment.stylist_id == stylist_id)
        result = await self.db.execute(query.order_by(Appointment.time))
        return list(result.scalars())
    
    async def create(self, data: AppointmentCreate) -> Appointment:
        """
        Book an appointment.
        
        The availability the customer saw may be stale, so the overlap test is
        re-run against the latest data while the settings row is locked, and
        the insert happens in the same transaction.
        """
        services = []
        if data.service_ids:
            services = await self.schedule.get_services(data.service_ids)
            footprint = combine_footprints(service_footprint(service) for service in services)
        else:
            footprint = ServiceFootprint(duration=data.duration)
        
        engine = await self.schedule.build_engine(
            data.date, stylist_id=data.stylist_id, for_update=True
        )
        if not engine.is_bookable(data.date, data.time, footprint.duration, data.stylist_id):
            await self.db.rollback()
            logger.info(
                "Booking conflict on %s %s (stylist %s, %s min)",
                data.date, data.time, data.stylist_id, footprint.duration,
            )
            raise BookingConflictError()
        
        appointment = Appointment(
            date=data.date,
            time=data.time,
            stylist_id=data.stylist_id,
            total_duration=footprint.duration,
            processing_wait_time=footprint.processing_wait_time,
            processing_duration=footprint.processing_duration,
            services=[
                {
                    "id": service.id,
                    "name": service.name,
                    "duration": service.duration,
                    "price": service.price,
                }
                for service in services
            ],
            total_price=sum(service.price or 0 for service in services),
            customer_name=data.customer_name,
            customer_email=data.customer_email,
            status=AppointmentStatus.SCHEDULED,
            booking_source=data.booking_source,
        )
        self.db.add(appointment)
        await self.db.commit()
        await self.db.refresh(appointment)
        
        logger.info(
            "Created appointment %s on %s %s for %s",
            appointment.id, appointment.date, appointment.time, appointment.customer_name,
        )
        return appointment
    
    async def reschedule(self, appointment_id: str, data: AppointmentReschedule) -> Appointment:
        """Move a scheduled appointment, re-checking the new slot like a new booking."""
        # Settings row first, then the appointment row
        await self.schedule.get_salon_settings(for_update=True)
        appointment = await self.get_by_id(appointment_id, for_update=True)
        self._require_scheduled(appointment, "reschedule")
        
        # An explicit null moves the booking back to "any stylist"
        if "stylist_id" in data.model_fields_set:
            stylist_id = data.stylist_id
        else:
            stylist_id = appointment.stylist_id
        engine = await self.schedule.build_engine(data.date, stylist_id=stylist_id, for_update=True)
        if not engine.is_bookable(
            data.date,
            data.time,
            appointment.total_duration,
            stylist_id,
            exclude_appointment_id=appointment.id,
        ):
            await self.db.rollback()
            raise BookingConflictError()
        
        appointment.date = data.date
        appointment.time = data.time
        appointment.stylist_id = stylist_id
        await self.db.commit()
        await self.db.refresh(appointment)
        
        logger.info("Rescheduled appointment %s to %s %s", appointment.id, data.date, data.time)
        return appointment
    
    async def cancel(self, appointment_id: str) -> Appointment:
        return await self._transition(appointment_id, AppointmentStatus.CANCELLED)
    
    async def mark_no_show(self, appointment_id: str) -> Appointment:
        return await self._transition(appointment_id, AppointmentStatus.NO_SHOW)
    
    async def complete(self, appointment_id: str) -> Appointment:
        return await self._transition(appointment_id, AppointmentStatus.COMPLETED)
    
    async def _transition(self, appointment_id: str, to_status: AppointmentStatus) -> Appointment:
        appointment = await self.get_by_id(appointment_id, for_update=True)
        self._require_scheduled(appointment, f"mark as {to_status.value}")
        
        appointment.status = to_status
        if to_status == AppointmentStatus.COMPLETED:
            appointment.completed_at = datetime.utcnow()
        elif to_status == AppointmentStatus.CANCELLED:
            appointment.cancelled_at = datetime.utcnow()
        
        await self.db.commit()
        await self.db.refresh(appointment)
        
        logger.info("Appointment %s -> %s", appointment.id, to_status.value)
        return appointment
    
    @staticmethod
    def _require_scheduled(appointment: Appointment, action: str) -> None:
        if appointment.status != AppointmentStatus.SCHEDULED:
            raise AppointmentStateError(
                f"Cannot {action} an appointment that is {AppointmentStatus(appointment.status).value}"
            )
