"""Appointment model - the occupancy source for availability."""

import uuid
from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import Column, String, DateTime, ForeignKey, Date, Integer, JSON, Index, Enum
from sqlalchemy.orm import relationship

from salon.database import Base
from salon.scheduling.occupancy import AppointmentSnapshot, AppointmentStatus


class BookingSource(str, PyEnum):
    """Where the booking came from."""
    WEB = "WEB"
    TELEGRAM = "TELEGRAM"
    WHATSAPP = "WHATSAPP"


class Appointment(Base):
    """Appointment entity."""
    
    __tablename__ = "appointments"
    
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    stylist_id = Column(String(36), ForeignKey("stylists.id", ondelete="SET NULL"))  # Null = any stylist
    
    # Scheduling
    date = Column(Date, nullable=False)
    time = Column(String(5), nullable=False)  # "HH:MM" in salon time
    total_duration = Column(Integer, nullable=False)
    processing_wait_time = Column(Integer, default=0, nullable=False)
    processing_duration = Column(Integer, default=0, nullable=False)
    
    # Booking details
    services = Column(JSON, default=list)  # [{"id", "name", "duration", "price"}]
    total_price = Column(Integer, default=0, nullable=False)
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)
    status = Column(Enum(AppointmentStatus), default=AppointmentStatus.SCHEDULED, nullable=False)
    booking_source = Column(Enum(BookingSource), default=BookingSource.WEB, nullable=False)
    
    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    completed_at = Column(DateTime)
    cancelled_at = Column(DateTime)
    
    # Relationships
    stylist = relationship("Stylist", back_populates="appointments")
    
    __table_args__ = (
        Index("ix_appointments_date_stylist", "date", "stylist_id"),
    )
    
    def to_snapshot(self) -> AppointmentSnapshot:
        """Read-only view handed to the availability engine."""
        return AppointmentSnapshot(
            id=self.id,
            date=self.date,
            time=self.time,
            total_duration=self.total_duration,
            stylist_id=self.stylist_id,
            status=self.status,
            processing_wait_time=self.processing_wait_time or 0,
            processing_duration=self.processing_duration or 0,
        )
    
    def __repr__(self):
        return f"<Appointment {self.date} {self.time} {self.status}>"
