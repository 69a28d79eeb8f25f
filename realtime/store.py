"""
Entity Store used by the realtime relay

Each method opens its own session and commits at most once, so every call is
one atomic single-entity write (plus its audit entry). Methods are blocking;
the relay runs them through the threadpool. Rows are returned as camelCase
dicts ready to be embedded in outbound frames.
"""
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, sessionmaker

from audit.crud import log_audit_entry
from auth.schema import UserResponse
from messaging.crud import create_message, get_messages_between
from messaging.schema import MessageResponse
from models import Flat, User
from shared_utils.schema import CamelModel
from visitors.models import Visitor
from visitors.schema import VisitorResponse
from visitors.state_machine import apply_transition
from .errors import NotFound

logger = logging.getLogger(__name__)


class FlatSummary(CamelModel):
    id: int
    flat_number: str
    floor: int
    building_id: int
    society_id: int
    owner_id: Optional[int] = None
    tenant_id: Optional[int] = None


class EntityStore:
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @contextmanager
    def session(self):
        db: Session = self.session_factory()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    # ---------------- reads ----------------

    def get_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        with self.session() as db:
            user = db.query(User).filter(User.id == user_id, User.is_active.is_(True)).first()
            return UserResponse.model_validate(user).model_dump(by_alias=True) if user else None

    def get_visitor(self, visitor_id: int, society_id: int) -> Optional[Dict[str, Any]]:
        with self.session() as db:
            visitor = db.query(Visitor).filter(Visitor.id == visitor_id, Visitor.society_id == society_id).first()
            return VisitorResponse.model_validate(visitor).model_dump(by_alias=True) if visitor else None

    def get_flat(self, flat_id: int, society_id: int) -> Optional[Dict[str, Any]]:
        with self.session() as db:
            flat = db.query(Flat).filter(Flat.id == flat_id, Flat.society_id == society_id).first()
            return FlatSummary.model_validate(flat).model_dump(by_alias=True) if flat else None

    def messages_between(self, society_id: int, user_a: int, user_b: int) -> List[Dict[str, Any]]:
        with self.session() as db:
            return [
                MessageResponse.model_validate(m).model_dump(by_alias=True)
                for m in get_messages_between(db, society_id, user_a, user_b)
            ]

    # ---------------- writes ----------------

    def update_visitor_status(
        self,
        visitor_id: int,
        society_id: int,
        target: str,
        actor_id: Optional[int],
    ) -> Dict[str, Any]:
        """
        Move a visitor along its state machine and append the audit entry.

        Raises:
            NotFound: no such visitor in the society
            InvalidTransition: illegal edge; nothing is written
        """
        with self.session() as db:
            # Row lock on PostgreSQL so concurrent updates re-validate against the committed status
            visitor = (db.query(Visitor)
                       .filter(Visitor.id == visitor_id, Visitor.society_id == society_id)
                       .with_for_update()
                       .first())
            if not visitor:
                raise NotFound(f"Visitor {visitor_id} not found")

            old_status = visitor.status
            changes = apply_transition(visitor, target, actor_id=actor_id, now=datetime.utcnow())
            log_audit_entry(
                db,
                user_id=actor_id,
                society_id=society_id,
                action="update_visitor_status",
                entity="visitor",
                entity_id=visitor.id,
                old_data={"status": old_status},
                new_data=changes,
                commit=False,
            )
            db.commit()
            db.refresh(visitor)
            return VisitorResponse.model_validate(visitor).model_dump(by_alias=True)

    def create_message(
        self,
        sender_id: int,
        society_id: int,
        content: str,
        receiver_id: Optional[int] = None,
        message_type: str = "text",
    ) -> Dict[str, Any]:
        with self.session() as db:
            message = create_message(
                db,
                sender_id=sender_id,
                society_id=society_id,
                content=content,
                receiver_id=receiver_id,
                message_type=message_type,
            )
            return MessageResponse.model_validate(message).model_dump(by_alias=True)

    def log_audit_entry(self, **entry) -> None:
        with self.session() as db:
            log_audit_entry(db, **entry)
