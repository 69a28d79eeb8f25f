from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Numeric, JSON
from config.database import Base
from datetime import datetime


class Complaint(Base):
    __tablename__ = "complaints"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False)
    priority = Column(String(20), default="medium")
    status = Column(String(20), nullable=False, default="open")
    flat_id = Column(Integer, ForeignKey("flats.id"), nullable=False)
    society_id = Column(Integer, ForeignKey("societies.id"), nullable=False, index=True)
    raised_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    assigned_to = Column(Integer, ForeignKey("users.id"), nullable=True)
    location = Column(String(255), nullable=True)
    estimated_cost = Column(Numeric(10, 2), nullable=True)
    actual_cost = Column(Numeric(10, 2), nullable=True)
    images = Column(JSON, default=list)
    resolution_notes = Column(Text, nullable=True)
    satisfaction_rating = Column(Integer, nullable=True)  # 1-5
    escalation_level = Column(Integer, default=0)
    due_date = Column(DateTime, nullable=True)
    resolved_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Complaint(id={self.id}, status={self.status})>"
