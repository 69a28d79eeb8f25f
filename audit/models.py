from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, JSON
from config.database import Base
from datetime import datetime


class AuditLog(Base):
    """Append-only record of every mutating operation. Never updated or deleted."""

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    society_id = Column(Integer, ForeignKey("societies.id"), nullable=False, index=True)
    action = Column(String(100), nullable=False)
    entity = Column(String(100), nullable=False)
    entity_id = Column(Integer, nullable=True)
    old_data = Column(JSON, nullable=True)
    new_data = Column(JSON, nullable=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<AuditLog(action={self.action}, entity={self.entity}, entity_id={self.entity_id})>"
