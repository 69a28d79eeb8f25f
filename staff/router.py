from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy import orm
from sqlalchemy.exc import SQLAlchemyError
from typing import List
from datetime import datetime
import logging

from config.database import get_db
from shared_utils.auth import get_current_user, require_roles
from shared_utils.helpers import society_day_bounds
from shared_utils.tenancy import get_owned_or_404
from audit.crud import log_audit_entry, snapshot
from models import User
from .models import Staff, StaffAttendance
from .schema import StaffCreate, StaffUpdate, StaffResponse, AttendanceMark, AttendanceResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/staff", tags=["staff"])


@router.get("", response_model=List[StaffResponse])
def list_staff(user: User = Depends(get_current_user), db: orm.Session = Depends(get_db)):
    return (db.query(Staff)
            .filter(Staff.society_id == user.society_id)
            .order_by(Staff.name.asc())
            .all())


@router.post("", response_model=StaffResponse, status_code=201)
def create_staff(
    payload: StaffCreate,
    request: Request,
    user: User = Depends(require_roles("admin")),
    db: orm.Session = Depends(get_db),
):
    member = Staff(**payload.model_dump(), society_id=user.society_id)
    db.add(member)
    db.flush()
    log_audit_entry(
        db,
        user_id=user.id,
        society_id=user.society_id,
        action="create_staff",
        entity="staff",
        entity_id=member.id,
        new_data=payload.model_dump(),
        ip_address=request.client.host if request.client else None,
        commit=False,
    )
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to create staff member: {e}")
        raise HTTPException(status_code=500, detail="Failed to create staff member")
    db.refresh(member)
    return member


@router.patch("/{staff_id}", response_model=StaffResponse)
def update_staff(
    staff_id: int,
    payload: StaffUpdate,
    user: User = Depends(require_roles("admin")),
    db: orm.Session = Depends(get_db),
):
    member = get_owned_or_404(db, Staff, staff_id, user.society_id, label="Staff member")
    updates = payload.model_dump(exclude_unset=True)
    old_data = snapshot(member, *updates.keys())
    for field, value in updates.items():
        setattr(member, field, value)

    log_audit_entry(
        db,
        user_id=user.id,
        society_id=user.society_id,
        action="update_staff",
        entity="staff",
        entity_id=member.id,
        old_data=old_data,
        new_data=updates,
        commit=False,
    )
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update staff member {staff_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update staff member")
    db.refresh(member)
    return member


@router.post("/{staff_id}/attendance", response_model=AttendanceResponse)
def mark_attendance(
    staff_id: int,
    payload: AttendanceMark,
    user: User = Depends(require_roles("admin", "guard")),
    db: orm.Session = Depends(get_db),
):
    """One attendance row per staff member per society-local day: update it if present, else create it."""
    member = get_owned_or_404(db, Staff, staff_id, user.society_id, label="Staff member")
    day_start, day_end = society_day_bounds()
    now = datetime.utcnow()

    record = (db.query(StaffAttendance)
              .filter(StaffAttendance.staff_id == member.id,
                      StaffAttendance.date >= day_start,
                      StaffAttendance.date < day_end)
              .first())

    if record:
        old_data = snapshot(record, "status", "check_in_time", "check_out_time")
        record.status = payload.status
        if payload.status == "present":
            record.check_in_time = record.check_in_time or now
            record.check_out_time = None
        elif record.check_in_time and not record.check_out_time:
            record.check_out_time = now
            record.hours_worked = round((now - record.check_in_time).total_seconds() / 3600, 2)
        if payload.notes:
            record.notes = payload.notes
        action = "update_attendance"
    else:
        old_data = None
        record = StaffAttendance(
            staff_id=member.id,
            society_id=user.society_id,
            date=day_start,
            check_in_time=now if payload.status == "present" else None,
            status=payload.status,
            notes=payload.notes,
        )
        db.add(record)
        action = "mark_attendance"

    db.flush()
    log_audit_entry(
        db,
        user_id=user.id,
        society_id=user.society_id,
        action=action,
        entity="staff",
        entity_id=member.id,
        old_data=old_data,
        new_data={"status": payload.status, "attendance_id": record.id},
        commit=False,
    )
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to record attendance for staff {staff_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to record attendance")
    db.refresh(record)
    logger.info(f"Attendance '{payload.status}' recorded for staff {member.id}")
    return record
