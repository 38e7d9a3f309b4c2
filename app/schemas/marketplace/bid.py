# app/schemas/marketplace/bid.py
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from app.db.models import BidStatus
from app.schemas.marketplace.contract import ContractResponse


class BidCreateRequest(BaseModel):
    proposed_amount: Decimal = Field(..., gt=0, max_digits=18, decimal_places=2)
    # Upper bound is MAX_BID_DURATION_DAYS, enforced by BidService
    estimated_duration_days: int = Field(..., ge=1, description="Estimated duration in days")
    cover_letter: str = Field(..., min_length=1)


class BidResponse(BaseModel):
    id: int
    project_id: int
    freelancer_id: str
    proposed_amount: Decimal
    estimated_duration_days: int
    cover_letter: str
    status: BidStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BidAcceptResponse(BaseModel):
    """Accepted bid together with the contract it produced"""
    bid: BidResponse
    contract: ContractResponse
