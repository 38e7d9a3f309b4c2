# app/schemas/marketplace/project.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from app.db.models import ProjectStatus


class ProjectCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    budget: Decimal = Field(..., gt=0, max_digits=18, decimal_places=2, description="Budget, 2 decimal places")
    deadline: Optional[datetime] = None
    category: Optional[str] = Field(None, max_length=100)


class ProjectUpdateRequest(BaseModel):
    """Fields left out are unchanged"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    budget: Optional[Decimal] = Field(None, gt=0, max_digits=18, decimal_places=2)
    deadline: Optional[datetime] = None
    category: Optional[str] = Field(None, max_length=100)


class ProjectResponse(BaseModel):
    id: int
    title: str
    description: str
    budget: Decimal
    deadline: Optional[datetime] = None
    category: Optional[str] = None
    client_id: str
    status: ProjectStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProjectListResponse(BaseModel):
    items: List[ProjectResponse]
    total: int
    page: int
    page_size: int
