from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import orm
from sqlalchemy.exc import SQLAlchemyError
from typing import List
from datetime import datetime
import logging

from config.database import get_db
from shared_utils.auth import get_current_user
from shared_utils.tenancy import get_owned_or_404
from audit.crud import log_audit_entry
from models import User
from .crud import create_message, get_messages_between
from .models import Message
from .schema import MessageCreate, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.get("/{user_id}", response_model=List[MessageResponse])
def conversation(user_id: int, user: User = Depends(get_current_user), db: orm.Session = Depends(get_db)):
    return get_messages_between(db, user.society_id, user.id, user_id)


@router.post("", response_model=MessageResponse, status_code=201)
def send_message(
    payload: MessageCreate,
    user: User = Depends(get_current_user),
    db: orm.Session = Depends(get_db),
):
    if payload.receiver_id is not None:
        get_owned_or_404(db, User, payload.receiver_id, user.society_id, label="Receiver")
    try:
        return create_message(db, sender_id=user.id, society_id=user.society_id, **payload.model_dump())
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to send message from user {user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to send message")


@router.post("/{message_id}/read", response_model=MessageResponse)
def mark_read(message_id: int, user: User = Depends(get_current_user), db: orm.Session = Depends(get_db)):
    message = get_owned_or_404(db, Message, message_id, user.society_id, label="Message")
    if message.receiver_id != user.id:
        raise HTTPException(status_code=403, detail="Only the receiver can mark a message as read")
    if not message.is_read:
        message.is_read = True
        message.read_at = datetime.utcnow()
        log_audit_entry(
            db,
            user_id=user.id,
            society_id=user.society_id,
            action="mark_message_read",
            entity="message",
            entity_id=message.id,
            old_data={"is_read": False},
            new_data={"is_read": True},
            commit=False,
        )
        try:
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to mark message {message_id} as read: {e}")
            raise HTTPException(status_code=500, detail="Failed to mark message as read")
        db.refresh(message)
    return message
