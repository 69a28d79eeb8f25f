from pydantic import Field
from typing import List, Literal, Optional
from datetime import datetime

from shared_utils.schema import CamelModel

ComplaintStatus = Literal["open", "in_progress", "resolved", "escalated", "closed"]
ComplaintPriority = Literal["low", "medium", "high", "critical"]


class ComplaintCreate(CamelModel):
    title: str
    description: str
    category: str
    priority: ComplaintPriority = "medium"
    flat_id: int
    location: Optional[str] = None
    images: List[str] = []
    due_date: Optional[datetime] = None


class ComplaintUpdate(CamelModel):
    status: Optional[ComplaintStatus] = None
    priority: Optional[ComplaintPriority] = None
    assigned_to: Optional[int] = None
    estimated_cost: Optional[float] = None
    actual_cost: Optional[float] = None
    resolution_notes: Optional[str] = None
    due_date: Optional[datetime] = None


class ComplaintFeedback(CamelModel):
    rating: int = Field(ge=1, le=5)


class ComplaintResponse(CamelModel):
    id: int
    title: str
    description: str
    category: str
    priority: Optional[str] = None
    status: str
    flat_id: int
    society_id: int
    raised_by: int
    assigned_to: Optional[int] = None
    location: Optional[str] = None
    estimated_cost: Optional[float] = None
    actual_cost: Optional[float] = None
    images: Optional[List[str]] = None
    resolution_notes: Optional[str] = None
    satisfaction_rating: Optional[int] = None
    escalation_level: Optional[int] = None
    due_date: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
