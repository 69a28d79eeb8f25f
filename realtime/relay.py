"""
Notification relay

Each inbound frame is parsed into a typed event, checked against the
connection's identity and tenant, persisted through the EntityStore when the
event has a side effect, and then delivered best-effort to the matching live
connections. Nothing is queued for offline receivers: they see the persisted
effect on their next read through the REST API.

Every failure is turned into a frame for the sender and a RelayResult for
the caller; no exception leaves `dispatch`.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError

from config.logging_config import relay_context
from shared_utils.auth import ExpiredSignatureError, InvalidTokenError, decode_access_token
from shared_utils.exceptions import InvalidTransition
from shared_utils.helpers import utc_timestamp
from .errors import AuthError, NotAuthenticated, NotFound, PersistenceError, RelayError, TenantMismatch
from .events import (
    EVENT_TYPES,
    AuthenticateEvent,
    EmergencyAlertEvent,
    MessageEvent,
    PingEvent,
    VisitorApprovalRequestEvent,
    VisitorStatusUpdateEvent,
    VoiceCallRequestEvent,
    VoiceCallResponseEvent,
    parse_event,
)
from .registry import Connection, ConnectionRegistry
from .store import EntityStore

logger = logging.getLogger(__name__)

# Events accepted before `authenticate` succeeds. Emergency alerts are never
# dropped, but an anonymous connection has no society to deliver them to.
UNAUTHENTICATED_EVENTS = frozenset({"authenticate", "ping", "emergency_alert"})

ALERT_ROLES = ("admin", "guard")


@dataclass
class RelayResult:
    event: Optional[str]
    ok: bool = True
    delivered: int = 0
    error: Optional[str] = None


class NotificationRelay:
    def __init__(self, registry: ConnectionRegistry, store: EntityStore):
        self.registry = registry
        self.store = store
        self._handlers = {
            "authenticate": self.handle_authenticate,
            "visitor_approval_request": self.handle_visitor_approval_request,
            "visitor_status_update": self.handle_visitor_status_update,
            "emergency_alert": self.handle_emergency_alert,
            "message": self.handle_message,
            "voice_call_request": self.handle_voice_call_request,
            "voice_call_response": self.handle_voice_call_response,
            "ping": self.handle_ping,
        }
        missing = EVENT_TYPES - set(self._handlers)
        if missing:
            raise RuntimeError(f"No relay handler for event types: {sorted(missing)}")

    # ---------------- dispatch ----------------

    async def dispatch(self, connection: Connection, raw: Optional[str]) -> RelayResult:
        event_type = None
        try:
            event = parse_event(raw)
            if event is None:
                return RelayResult(event=None)
            event_type = event.type

            if not connection.is_authenticated and event_type not in UNAUTHENTICATED_EVENTS:
                raise NotAuthenticated(event_type)

            logger.info(f"Relay event '{event_type}'", extra=relay_context(connection, event_type))
            delivered = await self._handlers[event_type](connection, event)
            return RelayResult(event=event_type, delivered=delivered)

        except RelayError as e:
            error = e
        except InvalidTransition as e:
            logger.info(f"Rejected '{event_type}' from {connection.describe()}: {e}", extra=relay_context(connection, event_type))
            error = RelayError(str(e))
        except SQLAlchemyError as e:
            logger.error(f"Persistence failure handling '{event_type}': {e}", exc_info=True,
                         extra=relay_context(connection, event_type))
            error = PersistenceError("Failed to persist event")
        except Exception as e:
            logger.error(f"WebSocket message error handling '{event_type}': {e}", exc_info=True,
                         extra=relay_context(connection, event_type))
            error = RelayError("Internal error")

        await self._reply(connection, error.to_frame())
        return RelayResult(event=event_type, ok=False, error=error.message)

    # ---------------- helpers ----------------

    async def _reply(self, connection: Connection, frame: Dict[str, Any]) -> None:
        try:
            await connection.send(frame)
        except Exception as e:
            logger.warning(f"Could not reply to {connection.describe()}: {e}")

    async def _deliver(self, targets: Iterable[Connection], frame: Dict[str, Any]) -> int:
        delivered = 0
        for target in targets:
            try:
                await target.send(frame)
                delivered += 1
            except Exception as e:
                logger.warning(f"Delivery of '{frame.get('type')}' to {target.describe()} failed: {e}")
        return delivered

    @staticmethod
    def _scope(connection: Connection, claimed_society_id: Optional[int]) -> Optional[int]:
        """The society an event is confined to: always the connection's own."""
        if claimed_society_id is not None and claimed_society_id != connection.society_id:
            raise TenantMismatch()
        return connection.society_id

    @staticmethod
    def _check_actor(connection: Connection, claimed_user_id: Optional[int], field: str) -> int:
        if claimed_user_id is not None and claimed_user_id != connection.user_id:
            raise RelayError(f"'{field}' does not match the authenticated user")
        return connection.user_id

    async def _user_in_society(self, user_id: int, society_id: int, label: str) -> Dict[str, Any]:
        user = await run_in_threadpool(self.store.get_user, user_id)
        if not user or user["societyId"] != society_id:
            raise NotFound(f"{label} {user_id} not found")
        return user

    # ---------------- handlers ----------------

    async def handle_authenticate(self, connection: Connection, event: AuthenticateEvent) -> int:
        try:
            claims = decode_access_token(event.token)
        except ExpiredSignatureError:
            raise AuthError("Token expired")
        except InvalidTokenError:
            raise AuthError("Invalid token")

        if str(claims.get("sub")) != str(event.user_id):
            raise AuthError("Token does not belong to this user")

        user = await run_in_threadpool(self.store.get_user, event.user_id)
        if not user:
            raise AuthError("Invalid user")

        self.registry.bind(connection.connection_id, user["id"], user["societyId"], user["role"])
        await self._reply(connection, {
            "type": "authenticated",
            "userId": user["id"],
            "role": user["role"],
            "societyId": user["societyId"],
            "timestamp": utc_timestamp(),
        })
        return 1

    async def handle_visitor_approval_request(self, connection: Connection, event: VisitorApprovalRequestEvent) -> int:
        society_id = self._scope(connection, None)

        visitor = await run_in_threadpool(self.store.get_visitor, event.visitor_id, society_id)
        if not visitor:
            raise NotFound(f"Visitor {event.visitor_id} not found")
        if visitor["flatId"] != event.flat_id:
            raise RelayError(f"Visitor {event.visitor_id} is not registered for flat {event.flat_id}")
        flat = await run_in_threadpool(self.store.get_flat, event.flat_id, society_id)

        targets = self.registry.by_user(event.resident_id, society_id=society_id)
        if not targets:
            logger.info(f"Resident {event.resident_id} not connected; approval request for visitor {event.visitor_id} not delivered")
        return await self._deliver(targets, {
            "type": "visitor_approval_request",
            "visitor": visitor,
            "flat": flat,
            "timestamp": utc_timestamp(),
        })

    async def handle_visitor_status_update(self, connection: Connection, event: VisitorStatusUpdateEvent) -> int:
        society_id = self._scope(connection, event.society_id)
        actor_id = self._check_actor(connection, event.approved_by, "approvedBy")

        visitor = await run_in_threadpool(
            self.store.update_visitor_status, event.visitor_id, society_id, event.status, actor_id
        )
        logger.info(f"Visitor {event.visitor_id} -> {event.status} by user {actor_id} (society {society_id})")

        return await self._deliver(self.registry.by_role(society_id, ("guard",)), {
            "type": "visitor_status_updated",
            "visitor": visitor,
            "status": event.status,
            "timestamp": utc_timestamp(),
        })

    async def handle_emergency_alert(self, connection: Connection, event: EmergencyAlertEvent) -> int:
        timestamp = utc_timestamp()
        details = {"location": event.location, "description": event.description, "timestamp": timestamp}

        if not connection.is_authenticated:
            logger.warning(
                f"🚨 Emergency alert from unauthenticated connection {connection.describe()} "
                f"(claimed user {event.user_id}, society {event.society_id}); no delivery scope"
            )
            if event.society_id is not None:
                await run_in_threadpool(
                    self.store.log_audit_entry,
                    user_id=None,
                    society_id=event.society_id,
                    action="emergency_alert",
                    entity="security",
                    new_data={**details, "claimed_user_id": event.user_id, "authenticated": False},
                )
            return 0

        society_id = self._scope(connection, event.society_id)
        user_id = self._check_actor(connection, event.user_id, "userId")

        await run_in_threadpool(
            self.store.log_audit_entry,
            user_id=user_id,
            society_id=society_id,
            action="emergency_alert",
            entity="security",
            new_data=details,
        )
        logger.warning(f"🚨 Emergency alert from user {user_id} in society {society_id} at {event.location}")

        return await self._deliver(self.registry.by_role(society_id, ALERT_ROLES), {
            "type": "emergency_alert",
            "userId": user_id,
            "location": event.location,
            "description": event.description,
            "timestamp": timestamp,
            "priority": "high",
        })

    async def handle_message(self, connection: Connection, event: MessageEvent) -> int:
        society_id = self._scope(connection, event.society_id)
        sender_id = self._check_actor(connection, event.sender_id, "senderId")
        if event.receiver_id is not None:
            await self._user_in_society(event.receiver_id, society_id, "Receiver")

        message = await run_in_threadpool(
            self.store.create_message,
            sender_id,
            society_id,
            event.content,
            event.receiver_id,
            event.message_type,
        )

        if event.receiver_id is None:
            targets = self.registry.by_society(society_id, exclude_user_id=sender_id)
        else:
            targets = self.registry.by_user(event.receiver_id, society_id=society_id)
        return await self._deliver(targets, {
            "type": "new_message",
            "message": message,
            "timestamp": utc_timestamp(),
        })

    async def handle_voice_call_request(self, connection: Connection, event: VoiceCallRequestEvent) -> int:
        society_id = self._scope(connection, None)
        caller_id = self._check_actor(connection, event.caller_id, "callerId")
        await self._user_in_society(event.receiver_id, society_id, "Receiver")
        caller = await run_in_threadpool(self.store.get_user, caller_id)

        return await self._deliver(self.registry.by_user(event.receiver_id, society_id=society_id), {
            "type": "incoming_voice_call",
            "callerId": caller_id,
            "callerName": caller["name"] if caller else None,
            "callType": event.call_type,
            "timestamp": utc_timestamp(),
        })

    async def handle_voice_call_response(self, connection: Connection, event: VoiceCallResponseEvent) -> int:
        society_id = self._scope(connection, event.society_id)
        receiver_id = self._check_actor(connection, event.receiver_id, "receiverId")

        await run_in_threadpool(
            self.store.log_audit_entry,
            user_id=receiver_id,
            society_id=society_id,
            action="voice_call_response",
            entity="call",
            new_data={"caller_id": event.caller_id, "response": event.response, "call_type": event.call_type},
        )

        return await self._deliver(self.registry.by_user(event.caller_id, society_id=society_id), {
            "type": "voice_call_response",
            "receiverId": receiver_id,
            "response": event.response,
            "callType": event.call_type,
            "timestamp": utc_timestamp(),
        })

    async def handle_ping(self, connection: Connection, event: PingEvent) -> int:
        await self._reply(connection, {"type": "pong", "timestamp": utc_timestamp()})
        return 1
