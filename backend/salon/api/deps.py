"""API dependencies for dependency injection and admin authentication."""

import secrets

from fastapi import Header, HTTPException, status

from salon.database import get_db
from salon.config import get_settings

settings = get_settings()

__all__ = ["get_db", "require_admin"]


# =============================================================================
# Admin Authentication
# =============================================================================

async def require_admin(
    x_admin_key: str = Header(None, alias="X-Admin-Key"),
) -> None:
    """Require the admin console key on the request."""
    if not x_admin_key or not secrets.compare_digest(x_admin_key, settings.ADMIN_API_KEY):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing admin key",
        )
