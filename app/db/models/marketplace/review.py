# app/db/models/marketplace/review.py
from typing import Optional
from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field
from datetime import datetime


class Review(SQLModel, table=True):
    """Rating left by one contract party for the other"""
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("contract_id", "reviewer_id", name="uq_reviews_contract_reviewer"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    contract_id: int = Field(foreign_key="contracts.id", index=True)
    reviewer_id: str = Field(max_length=100)
    reviewee_id: str = Field(max_length=100, index=True)
    rating: int  # 1-5
    comment: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
