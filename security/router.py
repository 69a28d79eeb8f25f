from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import orm
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Literal, Optional
from datetime import datetime
import logging

from config.database import get_db
from shared_utils.auth import get_current_user, require_roles
from shared_utils.schema import CamelModel
from shared_utils.tenancy import get_owned_or_404
from audit.crud import log_audit_entry
from models import User
from .models import SecurityAlert

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/security", tags=["security"])

AlertStatus = Literal["active", "acknowledged", "resolved"]


class AlertCreate(CamelModel):
    type: Literal["panic", "intrusion", "fire", "medical"]
    description: Optional[str] = None
    location: Optional[str] = None
    priority: Literal["low", "medium", "high", "critical"] = "high"


class AlertAction(CamelModel):
    notes: Optional[str] = None


class AlertResponse(CamelModel):
    id: int
    type: str
    description: Optional[str] = None
    location: Optional[str] = None
    society_id: int
    triggered_by: Optional[int] = None
    priority: Optional[str] = None
    status: str
    acknowledged_by: Optional[int] = None
    acknowledged_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@router.post("/alert", response_model=AlertResponse, status_code=201)
def raise_alert(
    payload: AlertCreate,
    user: User = Depends(get_current_user),
    db: orm.Session = Depends(get_db),
):
    # Persist only: live fan-out of alerts is the realtime relay's job (emergency_alert over /ws)
    alert = SecurityAlert(**payload.model_dump(), society_id=user.society_id, triggered_by=user.id, status="active")
    db.add(alert)
    db.flush()
    log_audit_entry(
        db,
        user_id=user.id,
        society_id=user.society_id,
        action="create_security_alert",
        entity="security_alert",
        entity_id=alert.id,
        new_data=payload.model_dump(),
        commit=False,
    )
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to raise security alert: {e}")
        raise HTTPException(status_code=500, detail="Failed to raise security alert")
    db.refresh(alert)
    logger.warning(f"🚨 Security alert {alert.id} ({alert.type}) raised in society {user.society_id}")
    return alert


@router.get("/alerts", response_model=List[AlertResponse])
def list_alerts(
    status: Optional[AlertStatus] = None,
    user: User = Depends(get_current_user),
    db: orm.Session = Depends(get_db),
):
    query = db.query(SecurityAlert).filter(SecurityAlert.society_id == user.society_id)
    if status:
        query = query.filter(SecurityAlert.status == status)
    return query.order_by(SecurityAlert.created_at.desc(), SecurityAlert.id.desc()).all()


def _change_alert_status(db, user: User, alert_id: int, target: str, notes: Optional[str]) -> SecurityAlert:
    alert = get_owned_or_404(db, SecurityAlert, alert_id, user.society_id, label="Security alert")
    allowed_from = {"acknowledged": ("active",), "resolved": ("active", "acknowledged")}[target]
    if alert.status not in allowed_from:
        raise HTTPException(status_code=400, detail=f"Alert is already {alert.status}")

    old_status = alert.status
    now = datetime.utcnow()
    alert.status = target
    if target == "acknowledged":
        alert.acknowledged_by = user.id
        alert.acknowledged_at = now
    else:
        alert.resolved_at = now
    if notes:
        alert.notes = notes

    log_audit_entry(
        db,
        user_id=user.id,
        society_id=user.society_id,
        action=f"{target}_security_alert",
        entity="security_alert",
        entity_id=alert.id,
        old_data={"status": old_status},
        new_data={"status": target, "notes": notes},
        commit=False,
    )
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to mark alert {alert_id} {target}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update security alert")
    db.refresh(alert)
    return alert


@router.post("/alerts/{alert_id}/acknowledge", response_model=AlertResponse)
def acknowledge_alert(
    alert_id: int,
    payload: AlertAction = AlertAction(),
    user: User = Depends(require_roles("admin", "guard")),
    db: orm.Session = Depends(get_db),
):
    return _change_alert_status(db, user, alert_id, "acknowledged", payload.notes)


@router.post("/alerts/{alert_id}/resolve", response_model=AlertResponse)
def resolve_alert(
    alert_id: int,
    payload: AlertAction = AlertAction(),
    user: User = Depends(require_roles("admin", "guard")),
    db: orm.Session = Depends(get_db),
):
    return _change_alert_status(db, user, alert_id, "resolved", payload.notes)
