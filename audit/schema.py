from shared_utils.schema import CamelModel
from typing import Any, Optional
from datetime import datetime


class AuditLogResponse(CamelModel):
    id: int
    user_id: Optional[int] = None
    society_id: int
    action: str
    entity: str
    entity_id: Optional[int] = None
    old_data: Optional[Any] = None
    new_data: Optional[Any] = None
    created_at: Optional[datetime] = None
