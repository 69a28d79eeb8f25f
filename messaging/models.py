from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text
from config.database import Base
from datetime import datetime

MESSAGE_TYPES = ("text", "image", "file", "voice")


class Message(Base):
    """Immutable once created, apart from the read receipt. A null receiver marks a group message."""

    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    receiver_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    society_id = Column(Integer, ForeignKey("societies.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    message_type = Column(String(20), default="text")
    attachment_url = Column(Text, nullable=True)
    is_read = Column(Boolean, default=False)
    read_at = Column(DateTime, nullable=True)
    is_group_message = Column(Boolean, default=False)
    group_id = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
