"""Salon-wide schedule settings (single row)."""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, JSON

from salon.database import Base


DEFAULT_WEEKLY_SCHEDULE = {
    "monday": {"is_open": True, "opening_time": "11:00", "closing_time": "19:00"},
    "tuesday": {"is_open": False, "opening_time": "11:00", "closing_time": "19:00"},
    "wednesday": {"is_open": True, "opening_time": "11:00", "closing_time": "19:00"},
    "thursday": {"is_open": True, "opening_time": "11:00", "closing_time": "19:00"},
    "friday": {"is_open": True, "opening_time": "11:00", "closing_time": "19:00"},
    "saturday": {"is_open": True, "opening_time": "11:00", "closing_time": "19:00"},
    "sunday": {"is_open": True, "opening_time": "11:00", "closing_time": "19:00"},
}


class SalonSettings(Base):
    """Schedule configuration shared by the whole salon."""
    
    __tablename__ = "salon_settings"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    
    # Schedule
    weekly_schedule = Column(JSON, nullable=False, default=lambda: dict(DEFAULT_WEEKLY_SCHEDULE))
    closed_dates = Column(JSON, default=list)  # ["2025-12-25", ...]
    special_closures = Column(JSON, default=list)  # BlockedPeriod dicts
    blocked_slots = Column(JSON, default=dict)  # {"2025-07-28": ["10:00", "10:30"]}
    schedule_mode = Column(String(20), default="salon_wide", nullable=False)
    
    # Business info
    business_name = Column(String(255), default="Signature Trims Hair Salon", nullable=False)
    timezone = Column(String(50), default="Asia/Singapore")
    
    # Timestamps
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    def __repr__(self):
        return f"<SalonSettings {self.business_name}>"
