# app/schemas/marketplace/review.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class ReviewCreateRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    comment: Optional[str] = Field(None, max_length=2000)


class ReviewResponse(BaseModel):
    id: int
    contract_id: int
    reviewer_id: str
    reviewee_id: str
    rating: int
    comment: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class UserReviewsResponse(BaseModel):
    user_id: str
    average_rating: Optional[float] = None
    reviews: List[ReviewResponse]
