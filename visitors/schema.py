from pydantic import field_validator
from typing import Literal, Optional
from datetime import datetime

from shared_utils.schema import CamelModel
from shared_utils.helpers import normalize_phone

VisitorType = Literal["guest", "delivery", "service", "cab", "vendor", "family"]
VisitorStatus = Literal["pending", "approved", "inside", "exited", "blocked"]


class VisitorCreate(CamelModel):
    name: str
    phone: str
    visitor_type: VisitorType
    flat_id: int
    purpose: Optional[str] = None
    vehicle_number: Optional[str] = None
    photo_url: Optional[str] = None
    id_proof_url: Optional[str] = None
    expected_duration: Optional[int] = None
    notes: Optional[str] = None

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v):
        normalized = normalize_phone(v)
        if not normalized:
            raise ValueError('phone is not a valid phone number')
        return normalized


class VisitorUpdate(CamelModel):
    status: Optional[VisitorStatus] = None
    purpose: Optional[str] = None
    vehicle_number: Optional[str] = None
    notes: Optional[str] = None
    expected_duration: Optional[int] = None


class VisitorResponse(CamelModel):
    id: int
    name: str
    phone: str
    visitor_type: str
    flat_id: int
    society_id: int
    purpose: Optional[str] = None
    vehicle_number: Optional[str] = None
    photo_url: Optional[str] = None
    status: str
    approved_by: Optional[int] = None
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    expected_duration: Optional[int] = None
    qr_code: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
