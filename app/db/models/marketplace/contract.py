# app/db/models/marketplace/contract.py
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime


class ContractStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    DISPUTED = "disputed"


class Contract(SQLModel, table=True):
    """Agreement between a client and a freelancer for one project"""
    __tablename__ = "contracts"

    id: Optional[int] = Field(default=None, primary_key=True)
    # One contract per project, ever
    project_id: int = Field(foreign_key="projects.id", unique=True, index=True)
    # Winning bid, if the contract came from an acceptance
    bid_id: Optional[int] = Field(default=None)
    client_id: str = Field(max_length=100, index=True)
    freelancer_id: str = Field(max_length=100, index=True)
    agreed_amount: Decimal = Field(max_digits=18, decimal_places=2)
    start_date: datetime
    end_date: Optional[datetime] = Field(default=None)
    terms: Optional[str] = Field(default=None)
    status: ContractStatus = Field(default=ContractStatus.ACTIVE, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
