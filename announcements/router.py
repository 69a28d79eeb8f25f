from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import orm, or_
from sqlalchemy.exc import IntegrityError
from typing import List
from datetime import datetime
import logging

from config.database import get_db
from shared_utils.auth import get_current_user, require_roles
from shared_utils.tenancy import get_owned_or_404
from models import User
from .models import Announcement, Poll, PollVote
from .schema import (
    AnnouncementCreate, AnnouncementResponse, PollCreate, PollResponse, PollVoteCreate, PollResults
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["announcements"])


@router.get("/announcements", response_model=List[AnnouncementResponse])
def list_announcements(user: User = Depends(get_current_user), db: orm.Session = Depends(get_db)):
    now = datetime.utcnow()
    return (db.query(Announcement)
            .filter(Announcement.society_id == user.society_id,
                    Announcement.is_active.is_(True),
                    or_(Announcement.expires_at.is_(None), Announcement.expires_at > now))
            .order_by(Announcement.created_at.desc(), Announcement.id.desc())
            .all())


@router.post("/announcements", response_model=AnnouncementResponse, status_code=201)
def create_announcement(
    payload: AnnouncementCreate,
    user: User = Depends(require_roles("admin")),
    db: orm.Session = Depends(get_db),
):
    announcement = Announcement(**payload.model_dump(), society_id=user.society_id, created_by=user.id)
    db.add(announcement)
    db.commit()
    db.refresh(announcement)
    return announcement


@router.post("/polls", response_model=PollResponse, status_code=201)
def create_poll(
    payload: PollCreate,
    user: User = Depends(require_roles("admin")),
    db: orm.Session = Depends(get_db),
):
    if payload.expires_at <= datetime.utcnow():
        raise HTTPException(status_code=400, detail="Poll expiry must be in the future")
    if payload.announcement_id is not None:
        get_owned_or_404(db, Announcement, payload.announcement_id, user.society_id, label="Announcement")

    poll = Poll(**payload.model_dump(), society_id=user.society_id)
    db.add(poll)
    db.commit()
    db.refresh(poll)
    return poll


@router.post("/polls/{poll_id}/vote", status_code=201)
def vote(
    poll_id: int,
    payload: PollVoteCreate,
    user: User = Depends(get_current_user),
    db: orm.Session = Depends(get_db),
):
    poll = get_owned_or_404(db, Poll, poll_id, user.society_id, label="Poll")
    if poll.expires_at <= datetime.utcnow():
        raise HTTPException(status_code=400, detail="Poll has expired")
    if not poll.allow_multiple and len(payload.selected_options) > 1:
        raise HTTPException(status_code=400, detail="This poll allows a single choice")
    if any(i < 0 or i >= len(poll.options) for i in payload.selected_options):
        raise HTTPException(status_code=400, detail="Selected option out of range")

    db.add(PollVote(poll_id=poll.id, user_id=user.id, selected_options=payload.selected_options))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="You have already voted in this poll")
    return {"success": True}


@router.get("/polls/{poll_id}/results", response_model=PollResults)
def poll_results(poll_id: int, user: User = Depends(get_current_user), db: orm.Session = Depends(get_db)):
    poll = get_owned_or_404(db, Poll, poll_id, user.society_id, label="Poll")
    votes = db.query(PollVote).filter(PollVote.poll_id == poll.id).all()

    counts = [0] * len(poll.options)
    for ballot in votes:
        for index in ballot.selected_options:
            if 0 <= index < len(counts):
                counts[index] += 1

    return {
        "poll_id": poll.id,
        "question": poll.question,
        "total_votes": len(votes),
        "results": [{"option": label, "votes": counts[i]} for i, label in enumerate(poll.options)],
    }
