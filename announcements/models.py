from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text, JSON, UniqueConstraint
from config.database import Base
from datetime import datetime


class Announcement(Base):
    __tablename__ = "announcements"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    type = Column(String(50), nullable=False)  # emergency, event, general, poll
    priority = Column(String(20), default="medium")
    society_id = Column(Integer, ForeignKey("societies.id"), nullable=False, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    target_audience = Column(JSON, default="all")
    attachments = Column(JSON, default=list)
    is_active = Column(Boolean, default=True)
    expires_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Poll(Base):
    __tablename__ = "polls"

    id = Column(Integer, primary_key=True, index=True)
    announcement_id = Column(Integer, ForeignKey("announcements.id"), nullable=True)
    question = Column(Text, nullable=False)
    options = Column(JSON, nullable=False)  # list of option labels
    allow_multiple = Column(Boolean, default=False)
    expires_at = Column(DateTime, nullable=False)
    society_id = Column(Integer, ForeignKey("societies.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class PollVote(Base):
    __tablename__ = "poll_votes"
    __table_args__ = (UniqueConstraint("poll_id", "user_id", name="uq_poll_vote_user"),)

    id = Column(Integer, primary_key=True, index=True)
    poll_id = Column(Integer, ForeignKey("polls.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    selected_options = Column(JSON, nullable=False)  # indices into Poll.options
    created_at = Column(DateTime, default=datetime.utcnow)
