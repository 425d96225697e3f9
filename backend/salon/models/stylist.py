"""Stylist model."""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, JSON
from sqlalchemy.orm import relationship

from salon.database import Base


class Stylist(Base):
    """Stylist entity - the bookable resource."""
    
    __tablename__ = "stylists"
    
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    
    # Basic Info
    name = Column(String(255), nullable=False)
    email = Column(String(255))
    bio = Column(String(1000))
    
    # Schedule
    working_hours = Column(JSON)  # Null = follow the salon's weekly schedule
    blocked_dates = Column(JSON, default=list)  # "YYYY-MM-DD" strings or BlockedPeriod dicts
    
    # Status
    is_active = Column(Boolean, default=True)
    
    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    appointments = relationship("Appointment", back_populates="stylist")
    
    def __repr__(self):
        return f"<Stylist {self.name}>"
