from pydantic import Field, field_validator
from typing import Dict, List, Literal, Optional
from datetime import datetime

from shared_utils.schema import CamelModel
from shared_utils.helpers import to_naive_utc

BookingStatus = Literal["confirmed", "cancelled", "completed"]


class AmenityCreate(CamelModel):
    name: str
    description: Optional[str] = None
    hourly_rate: Optional[float] = Field(default=None, ge=0)
    daily_rate: Optional[float] = Field(default=None, ge=0)
    capacity: Optional[int] = Field(default=None, gt=0)
    available_hours: Dict[str, str] = {}
    rules: Optional[str] = None
    images: List[str] = []


class AmenityResponse(AmenityCreate):
    id: int
    society_id: int
    is_active: Optional[bool] = None


class BookingCreate(CamelModel):
    amenity_id: int
    flat_id: int
    start_time: datetime
    end_time: datetime
    purpose: Optional[str] = None
    guests: int = Field(default=1, ge=1)
    notes: Optional[str] = None

    @field_validator('start_time', 'end_time')
    @classmethod
    def normalize_times(cls, v):
        return to_naive_utc(v)


class BookingResponse(CamelModel):
    id: int
    amenity_id: int
    flat_id: int
    society_id: int
    booked_by: int
    start_time: datetime
    end_time: datetime
    purpose: Optional[str] = None
    guests: Optional[int] = None
    total_amount: Optional[float] = None
    status: str
    payment_status: Optional[str] = None
    notes: Optional[str] = None
