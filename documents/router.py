from fastapi import APIRouter, Depends
from sqlalchemy import orm
from typing import List, Literal, Optional
from datetime import datetime

from config.database import get_db
from shared_utils.auth import get_current_user, require_roles
from shared_utils.schema import CamelModel
from models import User
from .models import Document

router = APIRouter(prefix="/api/documents", tags=["documents"])


class DocumentCreate(CamelModel):
    title: str
    description: Optional[str] = None
    category: str
    file_url: str
    file_name: str
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    access_level: Literal["all", "admin", "specific"] = "all"


class DocumentResponse(DocumentCreate):
    id: int
    society_id: int
    uploaded_by: int
    created_at: Optional[datetime] = None


@router.get("", response_model=List[DocumentResponse])
def list_documents(
    category: Optional[str] = None,
    user: User = Depends(get_current_user),
    db: orm.Session = Depends(get_db),
):
    query = db.query(Document).filter(Document.society_id == user.society_id, Document.is_active.is_(True))
    if category and category != "all":
        query = query.filter(Document.category == category)
    # Admin-only documents are hidden from everyone else
    if user.role != "admin":
        query = query.filter(Document.access_level != "admin")
    return query.order_by(Document.created_at.desc(), Document.id.desc()).all()


@router.post("", response_model=DocumentResponse, status_code=201)
def create_document(
    payload: DocumentCreate,
    user: User = Depends(require_roles("admin")),
    db: orm.Session = Depends(get_db),
):
    document = Document(**payload.model_dump(), society_id=user.society_id, uploaded_by=user.id)
    db.add(document)
    db.commit()
    db.refresh(document)
    return document
