"""Tools for scheduling operations used by the chat booking flow."""

from typing import List, Optional
from langchain.tools import tool


def create_schedule_tools(db_session):
    """Create schedule tools bound to a specific session."""
    
    @tool
    async def check_availability(
        date: str,
        duration: Optional[int] = None,
        service_ids: Optional[List[str]] = None,
        stylist_id: Optional[str] = None,
    ) -> dict:
        """
        Check bookable start times on a date (YYYY-MM-DD).
        Pass either the service ids being booked or a duration in minutes.
        """
        from salon.services.schedule_service import ScheduleService
        from salon.scheduling.timeutil import parse_date
        
        service = ScheduleService(db_session)
        target_date = parse_date(date)
        
        slots = await service.get_available_slots(
            target_date=target_date,
            duration=duration,
            service_ids=service_ids,
            stylist_id=stylist_id,
        )
        
        return {
            "date": target_date.isoformat(),
            "slots": slots,
        }
    
    @tool
    async def find_next_available_slot(
        duration: Optional[int] = None,
        service_ids: Optional[List[str]] = None,
        stylist_id: Optional[str] = None,
        days_to_search: int = 14,
    ) -> dict:
        """
        Find the next bookable start time.
        Useful for quickly offering an appointment.
        """
        from salon.services.schedule_service import ScheduleService
        
        service = ScheduleService(db_session)
        
        result = await service.find_next_available_slot(
            duration=duration,
            service_ids=service_ids,
            stylist_id=stylist_id,
            days_to_search=days_to_search,
        )
        
        if result is None:
            return {"found": False, "message": f"No availability in the next {days_to_search} days"}
        
        slot_date, slot_time = result
        return {
            "found": True,
            "date": slot_date.isoformat(),
            "time": slot_time,
        }
    
    @tool
    async def book_appointment(
        date: str,
        time: str,
        customer_name: str,
        customer_email: str,
        service_ids: Optional[List[str]] = None,
        duration: Optional[int] = None,
        stylist_id: Optional[str] = None,
    ) -> dict:
        """
        Book an appointment at a start time returned by check_availability.
        If the slot was taken in the meantime, offer the customer another one.
        """
        from salon.services.appointment_service import AppointmentService
        from salon.schemas.appointment import AppointmentCreate
        from salon.models.appointment import BookingSource
        from salon.scheduling import BookingConflictError
        from salon.scheduling.timeutil import parse_date
        
        service = AppointmentService(db_session)
        
        try:
            appointment = await service.create(AppointmentCreate(
                date=parse_date(date),
                time=time,
                service_ids=service_ids or [],
                duration=duration,
                stylist_id=stylist_id,
                customer_name=customer_name,
                customer_email=customer_email,
                booking_source=BookingSource.TELEGRAM,
            ))
        except BookingConflictError as exc:
            return {"success": False, "message": str(exc)}
        
        return {
            "success": True,
            "appointment_id": appointment.id,
            "date": appointment.date.isoformat(),
            "time": appointment.time,
            "total_duration": appointment.total_duration,
            "status": appointment.status.value,
        }
    
    return [
        check_availability,
        find_next_available_slot,
        book_appointment,
    ]
