from sqlalchemy.orm import Session
from fastapi.encoders import jsonable_encoder
from typing import Any, Optional
from .models import AuditLog


def log_audit_entry(
    db: Session,
    *,
    society_id: int,
    action: str,
    entity: str,
    user_id: Optional[int] = None,
    entity_id: Optional[int] = None,
    old_data: Any = None,
    new_data: Any = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
    commit: bool = True,
) -> AuditLog:
    """
    Append an audit entry. Pass commit=False to write it in the caller's
    transaction together with the change it records.
    """
    entry = AuditLog(
        user_id=user_id,
        society_id=society_id,
        action=action,
        entity=entity,
        entity_id=entity_id,
        old_data=jsonable_encoder(old_data) if old_data is not None else None,
        new_data=jsonable_encoder(new_data) if new_data is not None else None,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    db.add(entry)
    if commit:
        db.commit()
        db.refresh(entry)
    return entry


def snapshot(row, *fields) -> dict:
    """Plain dict of selected column values, for old_data/new_data"""
    return {field: getattr(row, field) for field in fields}


def get_audit_logs(db: Session, society_id: int, entity: Optional[str] = None, limit: int = 200):
    query = db.query(AuditLog).filter(AuditLog.society_id == society_id)
    if entity:
        query = query.filter(AuditLog.entity == entity)
    return query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(limit).all()
