from fastapi import APIRouter, Depends
from sqlalchemy import orm
from typing import Any, List, Optional
from datetime import datetime

from config.database import get_db
from shared_utils.auth import get_current_user, require_roles
from shared_utils.schema import CamelModel
from models import User
from .models import InventoryItem

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


class InventoryItemCreate(CamelModel):
    name: str
    description: Optional[str] = None
    category: str
    brand: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    purchase_date: Optional[datetime] = None
    purchase_price: Optional[float] = None
    current_value: Optional[float] = None
    condition: Optional[str] = None
    location: Optional[str] = None
    warranty_expiry: Optional[datetime] = None
    maintenance_schedule: Optional[Any] = None


class InventoryItemResponse(InventoryItemCreate):
    id: int
    society_id: int
    added_by: int
    is_active: Optional[bool] = None


@router.get("", response_model=List[InventoryItemResponse])
def list_inventory(user: User = Depends(get_current_user), db: orm.Session = Depends(get_db)):
    return (db.query(InventoryItem)
            .filter(InventoryItem.society_id == user.society_id, InventoryItem.is_active.is_(True))
            .order_by(InventoryItem.name.asc())
            .all())


@router.post("", response_model=InventoryItemResponse, status_code=201)
def create_inventory_item(
    payload: InventoryItemCreate,
    user: User = Depends(require_roles("admin")),
    db: orm.Session = Depends(get_db),
):
    item = InventoryItem(**payload.model_dump(), society_id=user.society_id, added_by=user.id)
    db.add(item)
    db.commit()
    db.refresh(item)
    return item
