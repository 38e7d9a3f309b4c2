# app/db/models/marketplace/bid.py
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlalchemy import Index, text
from sqlmodel import SQLModel, Field
from datetime import datetime


class BidStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


# Enum columns store member names
_ACTIVE_BID = text("status != 'WITHDRAWN'")


class Bid(SQLModel, table=True):
    """Bid submitted by a freelancer on an open project"""
    __tablename__ = "bids"
    __table_args__ = (
        # At most one non-withdrawn bid per freelancer and project
        Index(
            "uq_bids_project_freelancer_active",
            "project_id",
            "freelancer_id",
            unique=True,
            sqlite_where=_ACTIVE_BID,
            postgresql_where=_ACTIVE_BID,
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="projects.id", index=True, ondelete="CASCADE")
    freelancer_id: str = Field(max_length=100, index=True)
    proposed_amount: Decimal = Field(max_digits=18, decimal_places=2)
    estimated_duration_days: int
    cover_letter: str
    status: BidStatus = Field(default=BidStatus.PENDING, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
