# app/schemas/marketplace/payment.py
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from app.db.models import PaymentStatus, PaymentType


class PaymentCreateRequest(BaseModel):
    amount: Decimal = Field(..., gt=0, max_digits=18, decimal_places=2)
    type: PaymentType = Field(PaymentType.MILESTONE, description="deposit or milestone")
    description: Optional[str] = Field(None, max_length=500)
    transaction_id: Optional[str] = Field(None, max_length=100)


class PaymentResponse(BaseModel):
    id: int
    contract_id: int
    amount: Decimal
    status: PaymentStatus
    type: PaymentType
    transaction_id: Optional[str] = None
    description: Optional[str] = None
    processed_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class EarningsResponse(BaseModel):
    """Earnings for a freelancer, spending for a client"""
    user_id: str
    as_client: bool
    total: Decimal
    this_month: Decimal
    last_month: Decimal
    pending: Decimal
    percentage_change: Optional[Decimal] = None
    completed_count: int

    model_config = {"from_attributes": True}
