"""
Inbound WebSocket event catalogue

Every frame is a JSON object with a mandatory `type`. Each known type maps to
one pydantic model; the union is discriminated on `type` so adding an event
means adding a model here and a handler in the relay.
"""
import json
import logging
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from visitors.schema import VisitorStatus
from messaging.schema import MessageType
from .errors import MalformedEvent

logger = logging.getLogger(__name__)


class EventModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class AuthenticateEvent(EventModel):
    type: Literal["authenticate"]
    user_id: int
    token: str


class VisitorApprovalRequestEvent(EventModel):
    type: Literal["visitor_approval_request"]
    visitor_id: int
    flat_id: int
    resident_id: int


class VisitorStatusUpdateEvent(EventModel):
    type: Literal["visitor_status_update"]
    visitor_id: int
    status: VisitorStatus
    approved_by: Optional[int] = None
    society_id: Optional[int] = None


class EmergencyAlertEvent(EventModel):
    type: Literal["emergency_alert"]
    user_id: Optional[int] = None
    society_id: Optional[int] = None
    location: Optional[str] = None
    description: Optional[str] = None


class MessageEvent(EventModel):
    type: Literal["message"]
    sender_id: int
    receiver_id: Optional[int] = None
    content: str = Field(min_length=1)
    message_type: MessageType = "text"
    society_id: Optional[int] = None


class VoiceCallRequestEvent(EventModel):
    type: Literal["voice_call_request"]
    caller_id: int
    receiver_id: int
    call_type: str = "audio"


class VoiceCallResponseEvent(EventModel):
    type: Literal["voice_call_response"]
    caller_id: int
    receiver_id: int
    response: Literal["accept", "reject"]
    call_type: str = "audio"
    society_id: Optional[int] = None


class PingEvent(EventModel):
    type: Literal["ping"]


InboundEvent = Annotated[
    Union[
        AuthenticateEvent,
        VisitorApprovalRequestEvent,
        VisitorStatusUpdateEvent,
        EmergencyAlertEvent,
        MessageEvent,
        VoiceCallRequestEvent,
        VoiceCallResponseEvent,
        PingEvent,
    ],
    Field(discriminator="type"),
]

_event_adapter = TypeAdapter(InboundEvent)

EVENT_TYPES = frozenset({
    "authenticate",
    "visitor_approval_request",
    "visitor_status_update",
    "emergency_alert",
    "message",
    "voice_call_request",
    "voice_call_response",
    "ping",
})


def parse_event(raw: Optional[str]):
    """
    Parse one text frame. None stands for a frame with no text (binary).

    Returns:
        The typed event, or None for a well-formed frame with an unknown type

    Raises:
        MalformedEvent: no text, not JSON, not an object, no string `type`, or invalid fields
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        raise MalformedEvent("Invalid message format")

    if not isinstance(data, dict) or not isinstance(data.get("type"), str):
        raise MalformedEvent("Invalid message format")

    if data["type"] not in EVENT_TYPES:
        logger.info(f"Unknown message type: {data['type']}")
        return None

    try:
        return _event_adapter.validate_python(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise MalformedEvent(f"Invalid '{data['type']}' payload: {fields}")
