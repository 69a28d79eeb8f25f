from pydantic import Field, field_validator
from typing import Any, Dict, List, Literal, Optional
from datetime import datetime

from shared_utils.schema import CamelModel
from shared_utils.helpers import to_naive_utc

AnnouncementType = Literal["emergency", "event", "general", "poll"]


class AnnouncementCreate(CamelModel):
    title: str
    content: str
    type: AnnouncementType = "general"
    priority: Literal["low", "medium", "high"] = "medium"
    target_audience: Any = "all"
    attachments: List[str] = []
    expires_at: Optional[datetime] = None


class AnnouncementResponse(CamelModel):
    id: int
    title: str
    content: str
    type: str
    priority: Optional[str] = None
    society_id: int
    created_by: int
    target_audience: Optional[Any] = None
    attachments: Optional[List[str]] = None
    is_active: Optional[bool] = None
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class PollCreate(CamelModel):
    question: str
    options: List[str] = Field(min_length=2)
    allow_multiple: bool = False
    expires_at: datetime
    announcement_id: Optional[int] = None

    @field_validator('expires_at')
    @classmethod
    def normalize_expiry(cls, v):
        return to_naive_utc(v)


class PollResponse(CamelModel):
    id: int
    question: str
    options: List[str]
    allow_multiple: bool
    expires_at: datetime
    announcement_id: Optional[int] = None
    society_id: int


class PollVoteCreate(CamelModel):
    selected_options: List[int] = Field(min_length=1)

    @field_validator('selected_options')
    @classmethod
    def no_duplicates(cls, v):
        if len(set(v)) != len(v):
            raise ValueError('selected options must be unique')
        return v


class PollResults(CamelModel):
    poll_id: int
    question: str
    total_votes: int
    results: List[Dict[str, Any]]
