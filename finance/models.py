from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Numeric, JSON
from config.database import Base
from datetime import datetime

PAYMENT_STATUSES = ("pending", "paid", "overdue", "partial")


class MaintenanceBill(Base):
    __tablename__ = "maintenance_bills"

    id = Column(Integer, primary_key=True, index=True)
    flat_id = Column(Integer, ForeignKey("flats.id"), nullable=False)
    society_id = Column(Integer, ForeignKey("societies.id"), nullable=False, index=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    base_amount = Column(Numeric(10, 2), nullable=False)
    additional_charges = Column(JSON, default=dict)
    late_fee = Column(Numeric(10, 2), default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), default="pending")
    due_date = Column(DateTime, nullable=False)
    paid_date = Column(DateTime, nullable=True)
    payment_method = Column(String(50), nullable=True)
    transaction_id = Column(String(255), nullable=True)
    receipt_url = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    society_id = Column(Integer, ForeignKey("societies.id"), nullable=False, index=True)
    category = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    vendor = Column(String(255), nullable=True)
    bill_number = Column(String(100), nullable=True)
    bill_date = Column(DateTime, nullable=True)
    payment_date = Column(DateTime, nullable=True)
    payment_method = Column(String(50), nullable=True)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    attachments = Column(JSON, default=list)
    created_at = Column(DateTime, default=datetime.utcnow)
