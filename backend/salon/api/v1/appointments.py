"""Appointment booking endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from salon.api.deps import get_db
from salon.schemas.appointment import (
    AppointmentCreate,
    AppointmentReschedule,
    AppointmentResponse,
)
from salon.services.appointment_service import AppointmentService

router = APIRouter()


@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    data: AppointmentCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Book an appointment.
    Returns 409 if the slot was taken since availability was fetched.
    """
    service = AppointmentService(db)
    return await service.create(data)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: str,
    db: AsyncSession = Depends(get_db),
):
    service = AppointmentService(db)
    return await service.get_by_id(appointment_id)


@router.patch("/{appointment_id}/reschedule", response_model=AppointmentResponse)
async def reschedule_appointment(
    appointment_id: str,
    data: AppointmentReschedule,
    db: AsyncSession = Depends(get_db),
):
    """Move an appointment. The new slot is checked like a new booking."""
    service = AppointmentService(db)
    return await service.reschedule(appointment_id, data)


@router.post("/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment(
    appointment_id: str,
    db: AsyncSession = Depends(get_db),
):
    service = AppointmentService(db)
    return await service.cancel(appointment_id)


@router.post("/{appointment_id}/no-show", response_model=AppointmentResponse)
async def mark_no_show(
    appointment_id: str,
    db: AsyncSession = Depends(get_db),
):
    service = AppointmentService(db)
    return await service.mark_no_show(appointment_id)


@router.post("/{appointment_id}/complete", response_model=AppointmentResponse)
async def complete_appointment(
    appointment_id: str,
    db: AsyncSession = Depends(get_db),
):
    service = AppointmentService(db)
    return await service.complete(appointment_id)
