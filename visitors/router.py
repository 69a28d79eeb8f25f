from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy import orm
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
from datetime import date, datetime
import logging
import time

import pandas as pd

from config.database import get_db
from shared_utils.auth import get_current_user
from shared_utils.exceptions import InvalidTransition
from shared_utils.helpers import society_day_bounds
from shared_utils.tenancy import get_owned_or_404
from audit.crud import log_audit_entry, snapshot
from models import Flat, User
from .models import Visitor
from .schema import VisitorCreate, VisitorUpdate, VisitorResponse, VisitorStatus
from .state_machine import INITIAL_STATUS, apply_transition

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/visitors", tags=["visitors"])

EXPORT_COLUMNS = ["Name", "Phone", "Type", "Flat", "Status", "Entry Time", "Exit Time"]


def build_qr_code(name: str, phone: str) -> str:
    return f"visitor:{name}:{phone}:{int(time.time() * 1000)}"


def query_visitors(db: orm.Session, society_id: int, status: Optional[str] = None, day: Optional[date] = None):
    query = db.query(Visitor).filter(Visitor.society_id == society_id)
    if status:
        query = query.filter(Visitor.status == status)
    if day:
        start, end = society_day_bounds(day)
        query = query.filter(Visitor.created_at >= start, Visitor.created_at < end)
    return query.order_by(Visitor.created_at.desc(), Visitor.id.desc())


@router.get("", response_model=List[VisitorResponse])
def list_visitors(
    status: Optional[VisitorStatus] = None,
    date: Optional[date] = None,
    user: User = Depends(get_current_user),
    db: orm.Session = Depends(get_db),
):
    return query_visitors(db, user.society_id, status=status, day=date).all()


@router.get("/today", response_model=List[VisitorResponse])
def todays_visitors(user: User = Depends(get_current_user), db: orm.Session = Depends(get_db)):
    start, end = society_day_bounds()
    return (db.query(Visitor)
            .filter(Visitor.society_id == user.society_id,
                    Visitor.created_at >= start,
                    Visitor.created_at < end)
            .order_by(Visitor.created_at.desc())
            .all())


@router.get("/export")
def export_visitors(user: User = Depends(get_current_user), db: orm.Session = Depends(get_db)):
    visitors = query_visitors(db, user.society_id).all()
    df = pd.DataFrame(
        [
            [v.name, v.phone, v.visitor_type, v.flat_id, v.status, v.check_in_time or "", v.check_out_time or ""]
            for v in visitors
        ],
        columns=EXPORT_COLUMNS,
    )
    return Response(
        content=df.to_csv(index=False),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=visitors.csv"},
    )


@router.post("", response_model=VisitorResponse, status_code=201)
def create_visitor(
    payload: VisitorCreate,
    request: Request,
    user: User = Depends(get_current_user),
    db: orm.Session = Depends(get_db),
):
    get_owned_or_404(db, Flat, payload.flat_id, user.society_id, label="Flat")

    visitor = Visitor(
        **payload.model_dump(),
        society_id=user.society_id,
        status=INITIAL_STATUS,
        qr_code=build_qr_code(payload.name, payload.phone),
    )
    try:
        db.add(visitor)
        db.flush()

        log_audit_entry(
            db,
            user_id=user.id,
            society_id=user.society_id,
            action="create_visitor",
            entity="visitor",
            entity_id=visitor.id,
            new_data=payload.model_dump(),
            ip_address=request.client.host if request.client else None,
            commit=False,
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to register visitor: {e}")
        raise HTTPException(status_code=500, detail="Failed to register visitor")
    db.refresh(visitor)
    logger.info(f"Visitor {visitor.id} registered for flat {visitor.flat_id} (society {user.society_id})")
    return visitor


@router.patch("/{visitor_id}", response_model=VisitorResponse)
def update_visitor(
    visitor_id: int,
    payload: VisitorUpdate,
    user: User = Depends(get_current_user),
    db: orm.Session = Depends(get_db),
):
    visitor = get_owned_or_404(db, Visitor, visitor_id, user.society_id, label="Visitor")
    updates = payload.model_dump(exclude_unset=True, exclude_none=True)
    old_data = snapshot(visitor, "status", *[k for k in updates if k != "status"])

    target = updates.pop("status", None)
    changes = {}
    if target is not None:
        try:
            changes = apply_transition(visitor, target, actor_id=user.id, now=datetime.utcnow())
        except InvalidTransition as e:
            logger.info(f"Rejected visitor {visitor_id} update: {e}")
            raise HTTPException(status_code=400, detail=str(e))

    for field, value in updates.items():
        setattr(visitor, field, value)

    log_audit_entry(
        db,
        user_id=user.id,
        society_id=user.society_id,
        action="update_visitor",
        entity="visitor",
        entity_id=visitor.id,
        old_data=old_data,
        new_data={**updates, **changes},
        commit=False,
    )
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update visitor {visitor_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update visitor")
    db.refresh(visitor)
    return visitor
