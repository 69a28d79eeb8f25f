from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import orm
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
import logging

from config.database import get_db
from shared_utils.auth import get_current_user, require_roles
from shared_utils.tenancy import get_owned_or_404
from audit.crud import log_audit_entry
from models import Flat, User
from .models import MaintenanceBill, Expense
from .schema import BillCreate, BillPayment, BillResponse, ExpenseCreate, ExpenseResponse, PaymentStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/finance", tags=["finance"])


def bill_total(base_amount: float, additional_charges: dict, late_fee: float) -> Decimal:
    total = Decimal(str(base_amount)) + Decimal(str(late_fee))
    for amount in (additional_charges or {}).values():
        total += Decimal(str(amount))
    return total.quantize(Decimal("0.01"))


@router.get("/bills", response_model=List[BillResponse])
def list_bills(
    status: Optional[PaymentStatus] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
    user: User = Depends(get_current_user),
    db: orm.Session = Depends(get_db),
):
    query = db.query(MaintenanceBill).filter(MaintenanceBill.society_id == user.society_id)
    if status:
        query = query.filter(MaintenanceBill.status == status)
    # Month filtering only applies when both parts are given
    if month and year:
        query = query.filter(MaintenanceBill.month == month, MaintenanceBill.year == year)
    return query.order_by(MaintenanceBill.created_at.desc(), MaintenanceBill.id.desc()).all()


@router.post("/bills", response_model=BillResponse, status_code=201)
def create_bill(
    payload: BillCreate,
    user: User = Depends(require_roles("admin")),
    db: orm.Session = Depends(get_db),
):
    get_owned_or_404(db, Flat, payload.flat_id, user.society_id, label="Flat")
    bill = MaintenanceBill(
        **payload.model_dump(),
        society_id=user.society_id,
        total_amount=bill_total(payload.base_amount, payload.additional_charges, payload.late_fee),
        status="pending",
    )
    db.add(bill)
    db.flush()
    log_audit_entry(
        db,
        user_id=user.id,
        society_id=user.society_id,
        action="create_bill",
        entity="maintenance_bill",
        entity_id=bill.id,
        new_data=payload.model_dump(),
        commit=False,
    )
    db.commit()
    db.refresh(bill)
    return bill


@router.post("/bills/{bill_id}/pay", response_model=BillResponse)
def pay_bill(
    bill_id: int,
    payload: BillPayment,
    user: User = Depends(get_current_user),
    db: orm.Session = Depends(get_db),
):
    bill = get_owned_or_404(db, MaintenanceBill, bill_id, user.society_id, label="Bill")
    if bill.status == "paid":
        raise HTTPException(status_code=400, detail="Bill is already paid")

    partial = payload.amount is not None and Decimal(str(payload.amount)) < Decimal(bill.total_amount)
    bill.status = "partial" if partial else "paid"
    bill.paid_date = datetime.utcnow()
    bill.payment_method = payload.payment_method
    bill.transaction_id = payload.transaction_id

    log_audit_entry(
        db,
        user_id=user.id,
        society_id=user.society_id,
        action="pay_bill",
        entity="maintenance_bill",
        entity_id=bill.id,
        new_data={"status": bill.status, **payload.model_dump()},
        commit=False,
    )
    db.commit()
    db.refresh(bill)
    logger.info(f"Bill {bill.id} marked {bill.status} by user {user.id}")
    return bill


@router.get("/expenses", response_model=List[ExpenseResponse])
def list_expenses(
    category: Optional[str] = None,
    user: User = Depends(get_current_user),
    db: orm.Session = Depends(get_db),
):
    query = db.query(Expense).filter(Expense.society_id == user.society_id)
    if category:
        query = query.filter(Expense.category == category)
    return query.order_by(Expense.created_at.desc(), Expense.id.desc()).all()


@router.post("/expenses", response_model=ExpenseResponse, status_code=201)
def create_expense(
    payload: ExpenseCreate,
    user: User = Depends(require_roles("admin")),
    db: orm.Session = Depends(get_db),
):
    expense = Expense(**payload.model_dump(), society_id=user.society_id, approved_by=user.id)
    db.add(expense)
    db.commit()
    db.refresh(expense)
    return expense
