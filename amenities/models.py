from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text, Numeric, JSON
from config.database import Base
from datetime import datetime


class Amenity(Base):
    __tablename__ = "amenities"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    society_id = Column(Integer, ForeignKey("societies.id"), nullable=False, index=True)
    hourly_rate = Column(Numeric(10, 2), nullable=True)
    daily_rate = Column(Numeric(10, 2), nullable=True)
    capacity = Column(Integer, nullable=True)
    available_hours = Column(JSON, default=dict)  # {"start": "06:00", "end": "22:00"}
    rules = Column(Text, nullable=True)
    images = Column(JSON, default=list)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class AmenityBooking(Base):
    __tablename__ = "amenity_bookings"

    id = Column(Integer, primary_key=True, index=True)
    amenity_id = Column(Integer, ForeignKey("amenities.id"), nullable=False, index=True)
    flat_id = Column(Integer, ForeignKey("flats.id"), nullable=False)
    society_id = Column(Integer, ForeignKey("societies.id"), nullable=False, index=True)
    booked_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    purpose = Column(Text, nullable=True)
    guests = Column(Integer, default=1)
    total_amount = Column(Numeric(10, 2), nullable=True)
    status = Column(String(20), default="confirmed")  # confirmed, cancelled, completed
    payment_status = Column(String(20), default="pending")
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
