from pydantic import Field
from typing import Dict, List, Literal, Optional
from datetime import datetime

from shared_utils.schema import CamelModel

PaymentStatus = Literal["pending", "paid", "overdue", "partial"]


class BillCreate(CamelModel):
    flat_id: int
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=2000, le=2100)
    base_amount: float = Field(ge=0)
    additional_charges: Dict[str, float] = {}
    late_fee: float = Field(default=0, ge=0)
    due_date: datetime


class BillPayment(CamelModel):
    payment_method: str
    transaction_id: Optional[str] = None
    amount: Optional[float] = None


class BillResponse(CamelModel):
    id: int
    flat_id: int
    society_id: int
    month: int
    year: int
    base_amount: float
    additional_charges: Optional[Dict[str, float]] = None
    late_fee: Optional[float] = None
    total_amount: float
    status: str
    due_date: datetime
    paid_date: Optional[datetime] = None
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None


class ExpenseCreate(CamelModel):
    category: str
    description: str
    amount: float = Field(gt=0)
    vendor: Optional[str] = None
    bill_number: Optional[str] = None
    bill_date: Optional[datetime] = None
    payment_date: Optional[datetime] = None
    payment_method: Optional[str] = None
    attachments: List[str] = []


class ExpenseResponse(ExpenseCreate):
    id: int
    society_id: int
    approved_by: Optional[int] = None
    created_at: Optional[datetime] = None
