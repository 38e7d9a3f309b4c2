# app/schemas/marketplace/contract.py
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from app.db.models import ContractStatus


class ContractCreateRequest(BaseModel):
    project_id: int
    freelancer_id: str = Field(..., min_length=1, max_length=100)
    amount: Decimal = Field(..., gt=0, max_digits=18, decimal_places=2)
    start_date: datetime
    end_date: Optional[datetime] = None
    terms: Optional[str] = None


class ContractResponse(BaseModel):
    id: int
    project_id: int
    bid_id: Optional[int] = None
    client_id: str
    freelancer_id: str
    agreed_amount: Decimal
    start_date: datetime
    end_date: Optional[datetime] = None
    terms: Optional[str] = None
    status: ContractStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
