from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import orm
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
import logging

from config.database import get_db
from shared_utils.auth import get_current_user
from shared_utils.exceptions import InvalidTransition, TransitionNotPermitted
from shared_utils.tenancy import get_owned_or_404
from audit.crud import log_audit_entry, snapshot
from models import Flat, User
from .models import Complaint
from .schema import ComplaintCreate, ComplaintUpdate, ComplaintFeedback, ComplaintResponse, ComplaintStatus
from .state_machine import INITIAL_STATUS, apply_transition

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/complaints", tags=["complaints"])


@router.get("", response_model=List[ComplaintResponse])
def list_complaints(
    status: Optional[ComplaintStatus] = None,
    category: Optional[str] = None,
    user: User = Depends(get_current_user),
    db: orm.Session = Depends(get_db),
):
    query = db.query(Complaint).filter(Complaint.society_id == user.society_id)
    if status:
        query = query.filter(Complaint.status == status)
    if category:
        query = query.filter(Complaint.category == category)
    return query.order_by(Complaint.created_at.desc(), Complaint.id.desc()).all()


@router.post("", response_model=ComplaintResponse, status_code=201)
def create_complaint(
    payload: ComplaintCreate,
    user: User = Depends(get_current_user),
    db: orm.Session = Depends(get_db),
):
    get_owned_or_404(db, Flat, payload.flat_id, user.society_id, label="Flat")

    complaint = Complaint(
        **payload.model_dump(),
        society_id=user.society_id,
        raised_by=user.id,
        status=INITIAL_STATUS,
    )
    db.add(complaint)
    db.flush()
    log_audit_entry(
        db,
        user_id=user.id,
        society_id=user.society_id,
        action="create_complaint",
        entity="complaint",
        entity_id=complaint.id,
        new_data=payload.model_dump(),
        commit=False,
    )
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to create complaint: {e}")
        raise HTTPException(status_code=500, detail="Failed to create complaint")
    db.refresh(complaint)
    return complaint


@router.patch("/{complaint_id}", response_model=ComplaintResponse)
def update_complaint(
    complaint_id: int,
    payload: ComplaintUpdate,
    user: User = Depends(get_current_user),
    db: orm.Session = Depends(get_db),
):
    complaint = get_owned_or_404(db, Complaint, complaint_id, user.society_id, label="Complaint")
    updates = payload.model_dump(exclude_unset=True)
    old_data = snapshot(complaint, "status", *[k for k in updates if k != "status"])

    if updates.get("assigned_to") is not None:
        get_owned_or_404(db, User, updates["assigned_to"], user.society_id, label="Assignee")

    target = updates.pop("status", None)
    changes = {}
    if target is not None:
        try:
            changes = apply_transition(complaint, target, role=user.role)
        except InvalidTransition as e:
            raise HTTPException(status_code=400, detail=str(e))
        except TransitionNotPermitted as e:
            raise HTTPException(status_code=403, detail=str(e))

    for field, value in updates.items():
        setattr(complaint, field, value)

    log_audit_entry(
        db,
        user_id=user.id,
        society_id=user.society_id,
        action="update_complaint",
        entity="complaint",
        entity_id=complaint.id,
        old_data=old_data,
        new_data={**updates, **changes},
        commit=False,
    )
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update complaint {complaint_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update complaint")
    db.refresh(complaint)
    return complaint


@router.post("/{complaint_id}/feedback", response_model=ComplaintResponse)
def rate_complaint(
    complaint_id: int,
    payload: ComplaintFeedback,
    user: User = Depends(get_current_user),
    db: orm.Session = Depends(get_db),
):
    complaint = get_owned_or_404(db, Complaint, complaint_id, user.society_id, label="Complaint")
    if complaint.raised_by != user.id:
        raise HTTPException(status_code=403, detail="Only the person who raised the complaint can rate it")
    if complaint.status not in ("resolved", "closed"):
        raise HTTPException(status_code=400, detail="Complaint has not been resolved yet")

    old_rating = complaint.satisfaction_rating
    complaint.satisfaction_rating = payload.rating
    log_audit_entry(
        db,
        user_id=user.id,
        society_id=user.society_id,
        action="rate_complaint",
        entity="complaint",
        entity_id=complaint.id,
        old_data={"satisfaction_rating": old_rating},
        new_data={"satisfaction_rating": payload.rating},
        commit=False,
    )
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to rate complaint {complaint_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save feedback")
    db.refresh(complaint)
    return complaint
