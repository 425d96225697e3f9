"""Main router for API v1."""

from fastapi import APIRouter

from salon.api.v1 import admin, appointments, availability

api_router = APIRouter()

# =============================================================================
# Booking (public)
# =============================================================================
api_router.include_router(
    availability.router,
    prefix="/availability",
    tags=["Availability"]
)
api_router.include_router(
    appointments.router,
    prefix="/appointments",
    tags=["Appointments"]
)

# =============================================================================
# Admin Console
# =============================================================================
api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["Admin"]
)
