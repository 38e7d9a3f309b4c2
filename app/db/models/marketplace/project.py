# app/db/models/marketplace/project.py
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime


class ProjectStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    CLOSED = "closed"


class Project(SQLModel, table=True):
    """Project posted by a client"""
    __tablename__ = "projects"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=200)
    description: str
    budget: Decimal = Field(max_digits=18, decimal_places=2)
    deadline: Optional[datetime] = Field(default=None)
    category: Optional[str] = Field(default=None, max_length=100, index=True)
    client_id: str = Field(max_length=100, index=True)  # Owning client identity
    status: ProjectStatus = Field(default=ProjectStatus.OPEN, index=True)
    is_deleted: bool = Field(default=False)  # Soft delete
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
