from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from config.database import Base
from datetime import datetime

VISITOR_TYPES = ("guest", "delivery", "service", "cab", "vendor", "family")


class Visitor(Base):
    __tablename__ = "visitors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(15), nullable=False)
    visitor_type = Column(String(20), nullable=False)
    flat_id = Column(Integer, ForeignKey("flats.id"), nullable=False)
    society_id = Column(Integer, ForeignKey("societies.id"), nullable=False, index=True)
    purpose = Column(Text, nullable=True)
    vehicle_number = Column(String(20), nullable=True)
    photo_url = Column(Text, nullable=True)
    id_proof_url = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="pending")
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    check_in_time = Column(DateTime, nullable=True)
    check_out_time = Column(DateTime, nullable=True)
    expected_duration = Column(Integer, nullable=True)  # minutes
    qr_code = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    flat = relationship("Flat")

    def __repr__(self):
        return f"<Visitor(id={self.id}, status={self.status})>"
