"""Salon service model."""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text

from salon.database import Base


class Service(Base):
    """A bookable service, e.g. a cut or a colour."""
    
    __tablename__ = "services"
    
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    
    name = Column(String(255), nullable=False)
    description = Column(Text)
    price = Column(Integer, nullable=False, default=0)
    
    # Duration in minutes
    duration = Column(Integer, nullable=False)
    # Processing gap: minutes from start until the stylist is free, and for how long
    processing_wait_time = Column(Integer, default=0, nullable=False)
    processing_duration = Column(Integer, default=0, nullable=False)
    
    is_active = Column(Boolean, default=True)
    
    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    def __repr__(self):
        return f"<Service {self.name} {self.duration}min>"
