# app/routers/review_router.py
from typing import List

from fastapi import APIRouter, Depends, status

from app.routers.deps import get_actor, get_contract_service, get_review_service, require_party
from app.schemas.marketplace import ReviewCreateRequest, ReviewResponse, UserReviewsResponse
from app.services.marketplace import Actor, ContractService, ReviewService

router = APIRouter(prefix="/api", tags=["Reviews"])


@router.post(
    "/contracts/{contract_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_review(
    contract_id: int,
    payload: ReviewCreateRequest,
    actor: Actor = Depends(require_party),
    review_service: ReviewService = Depends(get_review_service),
):
    """Review the other party of a completed contract (once per reviewer)"""
    review = review_service.create_review(
        contract_id=contract_id,
        reviewer_id=actor.user_id,
        rating=payload.rating,
        comment=payload.comment,
    )
    return ReviewResponse.model_validate(review)


@router.get("/contracts/{contract_id}/reviews", response_model=List[ReviewResponse])
async def list_contract_reviews(
    contract_id: int,
    actor: Actor = Depends(get_actor),
    contract_service: ContractService = Depends(get_contract_service),
    review_service: ReviewService = Depends(get_review_service),
):
    contract_service.get_contract_for_party(contract_id, actor.user_id)
    return [ReviewResponse.model_validate(r) for r in review_service.list_reviews_for_contract(contract_id)]


@router.get("/users/{user_id}/reviews", response_model=UserReviewsResponse)
async def list_user_reviews(
    user_id: str,
    review_service: ReviewService = Depends(get_review_service),
):
    """Public reviews received by a user, with their average rating"""
    reviews = review_service.list_reviews_for_user(user_id)
    return UserReviewsResponse(
        user_id=user_id,
        average_rating=review_service.average_rating(user_id),
        reviews=[ReviewResponse.model_validate(r) for r in reviews],
    )
