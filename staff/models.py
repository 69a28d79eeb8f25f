from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text, Numeric
from sqlalchemy.orm import relationship
from config.database import Base
from datetime import datetime

STAFF_CATEGORIES = ("housekeeping", "security", "maintenance", "gardening", "management")


class Staff(Base):
    __tablename__ = "staff"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(15), nullable=False)
    category = Column(String(20), nullable=False)
    society_id = Column(Integer, ForeignKey("societies.id"), nullable=False, index=True)
    shift_timing = Column(String(50), nullable=True)
    salary = Column(Numeric(10, 2), nullable=True)
    joining_date = Column(DateTime, nullable=True)
    id_proof_type = Column(String(50), nullable=True)
    id_proof_number = Column(String(100), nullable=True)
    photo_url = Column(Text, nullable=True)
    address = Column(Text, nullable=True)
    emergency_contact = Column(String(15), nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    attendance = relationship("StaffAttendance", back_populates="staff")


class StaffAttendance(Base):
    __tablename__ = "staff_attendance"

    id = Column(Integer, primary_key=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=False, index=True)
    society_id = Column(Integer, ForeignKey("societies.id"), nullable=False)
    date = Column(DateTime, nullable=False)  # start of the society-local day, naive UTC
    check_in_time = Column(DateTime, nullable=True)
    check_out_time = Column(DateTime, nullable=True)
    hours_worked = Column(Numeric(4, 2), nullable=True)
    status = Column(String(20), default="present")  # present, absent, late, half_day
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    staff = relationship("Staff", back_populates="attendance")
