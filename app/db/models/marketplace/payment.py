# app/db/models/marketplace/payment.py
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentType(str, Enum):
    DEPOSIT = "deposit"
    MILESTONE = "milestone"
    FINAL = "final"
    REFUND = "refund"


class PaymentTransaction(SQLModel, table=True):
    """Money moving from a contract's client to its freelancer"""
    __tablename__ = "payment_transactions"

    id: Optional[int] = Field(default=None, primary_key=True)
    contract_id: int = Field(foreign_key="contracts.id", index=True)
    amount: Decimal = Field(max_digits=18, decimal_places=2)
    status: PaymentStatus = Field(default=PaymentStatus.PENDING, index=True)
    type: PaymentType
    # External reference from the payment processor
    transaction_id: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    processed_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
