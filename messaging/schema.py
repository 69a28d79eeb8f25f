from pydantic import Field
from typing import Literal, Optional
from datetime import datetime

from shared_utils.schema import CamelModel

MessageType = Literal["text", "image", "file", "voice"]


class MessageCreate(CamelModel):
    receiver_id: Optional[int] = None
    content: str = Field(min_length=1)
    message_type: MessageType = "text"
    attachment_url: Optional[str] = None
    group_id: Optional[str] = None


class MessageResponse(CamelModel):
    id: int
    sender_id: int
    receiver_id: Optional[int] = None
    society_id: int
    content: str
    message_type: Optional[str] = None
    attachment_url: Optional[str] = None
    is_read: Optional[bool] = None
    read_at: Optional[datetime] = None
    is_group_message: Optional[bool] = None
    group_id: Optional[str] = None
    created_at: Optional[datetime] = None
