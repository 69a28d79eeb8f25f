from fastapi import APIRouter, Depends
from sqlalchemy import orm, func

from config.database import get_db
from shared_utils.auth import get_current_user
from shared_utils.helpers import society_day_bounds
from models import User
from visitors.models import Visitor
from complaints.models import Complaint
from finance.models import MaintenanceBill
from security.models import SecurityAlert

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats")
def dashboard_stats(user: User = Depends(get_current_user), db: orm.Session = Depends(get_db)):
    society_id = user.society_id
    start, end = society_day_bounds()

    def count(model, *criteria):
        return db.query(func.count(model.id)).filter(model.society_id == society_id, *criteria).scalar()

    return {
        "todaysVisitors": count(Visitor, Visitor.created_at >= start, Visitor.created_at < end),
        "visitorsInside": count(Visitor, Visitor.status == "inside"),
        "pendingApprovals": count(Visitor, Visitor.status == "pending"),
        "openComplaints": count(Complaint, Complaint.status.in_(("open", "in_progress", "escalated"))),
        "pendingBills": count(MaintenanceBill, MaintenanceBill.status.in_(("pending", "overdue", "partial"))),
        "activeAlerts": count(SecurityAlert, SecurityAlert.status == "active"),
    }
