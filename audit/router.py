from fastapi import APIRouter, Depends, Query
from sqlalchemy import orm
from typing import List, Optional
from config.database import get_db
from shared_utils.auth import require_roles
from models import User
from .crud import get_audit_logs
from .schema import AuditLogResponse

router = APIRouter(prefix="/api", tags=["audit"])


@router.get("/audit-logs", response_model=List[AuditLogResponse])
def list_audit_logs(
    entity: Optional[str] = None,
    limit: int = Query(200, ge=1, le=1000),
    user: User = Depends(require_roles("admin", "auditor")),
    db: orm.Session = Depends(get_db),
):
    return get_audit_logs(db, user.society_id, entity=entity, limit=limit)
