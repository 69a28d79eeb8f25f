from fastapi import HTTPException
from sqlalchemy.orm import Session


def get_owned_or_404(db: Session, model, row_id: int, society_id: int, label: str = None):
    """
    Fetch a tenant-scoped row by id. Rows of other societies are reported as
    missing so ids never leak across tenants.
    """
    row = db.query(model).filter(model.id == row_id, model.society_id == society_id).first()
    if not row:
        raise HTTPException(status_code=404, detail=f"{label or model.__name__} not found")
    return row
