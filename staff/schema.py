from pydantic import field_validator
from typing import Literal, Optional
from datetime import datetime

from shared_utils.schema import CamelModel
from shared_utils.helpers import normalize_phone

StaffCategory = Literal["housekeeping", "security", "maintenance", "gardening", "management"]
AttendanceStatus = Literal["present", "absent", "late", "half_day"]


class StaffBase(CamelModel):
    name: str
    phone: str
    category: StaffCategory
    shift_timing: Optional[str] = None
    salary: Optional[float] = None
    joining_date: Optional[datetime] = None
    id_proof_type: Optional[str] = None
    id_proof_number: Optional[str] = None
    photo_url: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None


class StaffCreate(StaffBase):
    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v):
        normalized = normalize_phone(v)
        if not normalized:
            raise ValueError('phone is not a valid phone number')
        return normalized


class StaffUpdate(CamelModel):
    name: Optional[str] = None
    category: Optional[StaffCategory] = None
    shift_timing: Optional[str] = None
    salary: Optional[float] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None
    is_active: Optional[bool] = None


class StaffResponse(StaffBase):
    id: int
    society_id: int
    is_active: Optional[bool] = None
    created_at: Optional[datetime] = None


class AttendanceMark(CamelModel):
    status: AttendanceStatus
    notes: Optional[str] = None


class AttendanceResponse(CamelModel):
    id: int
    staff_id: int
    date: datetime
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    hours_worked: Optional[float] = None
    status: str
