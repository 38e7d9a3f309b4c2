# app/schemas/marketplace/portfolio.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class PortfolioCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    detailed_bio: Optional[str] = None
    profile_image_url: Optional[str] = Field(None, max_length=500)
    cover_image_url: Optional[str] = Field(None, max_length=500)
    is_public: bool = True


class PortfolioUpdateRequest(BaseModel):
    """Fields left out are unchanged"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    detailed_bio: Optional[str] = None
    profile_image_url: Optional[str] = Field(None, max_length=500)
    cover_image_url: Optional[str] = Field(None, max_length=500)
    is_public: Optional[bool] = None


class PortfolioFeatureRequest(BaseModel):
    is_featured: bool


class PortfolioResponse(BaseModel):
    id: int
    freelancer_id: str
    title: str
    description: Optional[str] = None
    detailed_bio: Optional[str] = None
    profile_image_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    is_public: bool
    is_featured: bool
    view_count: int
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PortfolioListResponse(BaseModel):
    items: List[PortfolioResponse]
    total: int
    page: int
    page_size: int


class PortfolioCaseRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=500)
    detailed_description: Optional[str] = None
    client_name: Optional[str] = Field(None, max_length=200)
    industry: Optional[str] = Field(None, max_length=100)
    project_url: Optional[str] = Field(None, max_length=500)
    budget_amount: Optional[Decimal] = Field(None, gt=0, max_digits=18, decimal_places=2)
    completion_date: Optional[datetime] = None
    technologies: Optional[str] = Field(None, max_length=500, description="Comma separated")
    display_order: int = Field(0, ge=0)


class PortfolioCaseUpdateRequest(BaseModel):
    """Fields left out are unchanged"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=500)
    detailed_description: Optional[str] = None
    client_name: Optional[str] = Field(None, max_length=200)
    industry: Optional[str] = Field(None, max_length=100)
    project_url: Optional[str] = Field(None, max_length=500)
    budget_amount: Optional[Decimal] = Field(None, gt=0, max_digits=18, decimal_places=2)
    completion_date: Optional[datetime] = None
    technologies: Optional[str] = Field(None, max_length=500)
    display_order: Optional[int] = Field(None, ge=0)


class PortfolioCaseResponse(BaseModel):
    id: int
    portfolio_id: int
    title: str
    description: Optional[str] = None
    detailed_description: Optional[str] = None
    client_name: Optional[str] = None
    industry: Optional[str] = None
    project_url: Optional[str] = None
    budget_amount: Optional[Decimal] = None
    budget_currency: str
    completion_date: Optional[datetime] = None
    technologies: Optional[str] = None
    display_order: int
    view_count: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
