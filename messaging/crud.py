from sqlalchemy import and_, or_
from sqlalchemy.orm import Session
from typing import List, Optional
from audit.crud import log_audit_entry
from .models import Message


def create_message(
    db: Session,
    *,
    sender_id: int,
    society_id: int,
    content: str,
    receiver_id: Optional[int] = None,
    message_type: str = "text",
    attachment_url: Optional[str] = None,
    group_id: Optional[str] = None,
) -> Message:
    """Persist a message together with its audit entry in one commit"""
    message = Message(
        sender_id=sender_id,
        receiver_id=receiver_id,
        society_id=society_id,
        content=content,
        message_type=message_type or "text",
        attachment_url=attachment_url,
        is_group_message=receiver_id is None,
        group_id=group_id,
    )
    db.add(message)
    db.flush()
    log_audit_entry(
        db,
        user_id=sender_id,
        society_id=society_id,
        action="create_message",
        entity="message",
        entity_id=message.id,
        new_data={"receiver_id": receiver_id, "message_type": message.message_type},
        commit=False,
    )
    db.commit()
    db.refresh(message)
    return message


def get_messages_between(db: Session, society_id: int, user_a: int, user_b: int) -> List[Message]:
    return (db.query(Message)
            .filter(Message.society_id == society_id,
                    or_(and_(Message.sender_id == user_a, Message.receiver_id == user_b),
                        and_(Message.sender_id == user_b, Message.receiver_id == user_a)))
            .order_by(Message.created_at.asc(), Message.id.asc())
            .all())
