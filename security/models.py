from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from config.database import Base
from datetime import datetime

ALERT_TYPES = ("panic", "intrusion", "fire", "medical")


class SecurityAlert(Base):
    __tablename__ = "security_alerts"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    society_id = Column(Integer, ForeignKey("societies.id"), nullable=False, index=True)
    triggered_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    priority = Column(String(20), default="high")
    status = Column(String(20), default="active")  # active, acknowledged, resolved
    acknowledged_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    acknowledged_at = Column(DateTime, nullable=True)
    resolved_at = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
