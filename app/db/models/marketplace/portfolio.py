# app/db/models/marketplace/portfolio.py
from decimal import Decimal
from typing import Optional
from sqlalchemy import Index, text
from sqlmodel import SQLModel, Field
from datetime import datetime


class Portfolio(SQLModel, table=True):
    """Public showcase of a freelancer's work"""
    __tablename__ = "portfolios"
    __table_args__ = (
        # One live portfolio per freelancer
        Index(
            "uq_portfolios_freelancer_live",
            "freelancer_id",
            unique=True,
            sqlite_where=text("is_deleted = 0"),
            postgresql_where=text("NOT is_deleted"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    freelancer_id: str = Field(max_length=100, index=True)
    title: str = Field(max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    detailed_bio: Optional[str] = Field(default=None)
    profile_image_url: Optional[str] = Field(default=None, max_length=500)
    cover_image_url: Optional[str] = Field(default=None, max_length=500)
    is_public: bool = Field(default=True)
    is_featured: bool = Field(default=False)
    view_count: int = Field(default=0)
    published_at: Optional[datetime] = Field(default=None)
    is_deleted: bool = Field(default=False)  # Soft delete
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class PortfolioCase(SQLModel, table=True):
    """Case study / work sample inside a portfolio"""
    __tablename__ = "portfolio_cases"

    id: Optional[int] = Field(default=None, primary_key=True)
    portfolio_id: int = Field(foreign_key="portfolios.id", index=True, ondelete="CASCADE")
    title: str = Field(max_length=200)
    description: Optional[str] = Field(default=None, max_length=500)
    detailed_description: Optional[str] = Field(default=None)
    client_name: Optional[str] = Field(default=None, max_length=200)
    industry: Optional[str] = Field(default=None, max_length=100)
    project_url: Optional[str] = Field(default=None, max_length=500)
    budget_amount: Optional[Decimal] = Field(default=None, max_digits=18, decimal_places=2)
    budget_currency: str = Field(default="USD", max_length=3)
    completion_date: Optional[datetime] = Field(default=None)
    technologies: Optional[str] = Field(default=None, max_length=500)
    display_order: int = Field(default=0)
    view_count: int = Field(default=0)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
