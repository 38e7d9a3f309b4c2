# app/services/marketplace/review_service.py
import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from app.core.errors import (
    DuplicateReviewError,
    InvalidStateError,
    NotFoundError,
    UnauthorizedError,
)
from app.db.models import Contract, ContractStatus, Review
from app.services.marketplace.validation import validate_rating

logger = logging.getLogger(__name__)


class ReviewService:
    """Reviews gated on a completed contract, one per (contract, reviewer)"""

    def __init__(self, session: Session, now: Optional[Callable[[], datetime]] = None):
        self.session = session
        self._now = now or datetime.utcnow

    def create_review(
        self,
        contract_id: int,
        reviewer_id: str,
        rating: int,
        comment: Optional[str] = None,
    ) -> Review:
        rating = validate_rating(rating)

        contract = self.session.get(Contract, contract_id)
        if contract is None:
            raise NotFoundError("Contract not found.")
        if contract.status != ContractStatus.COMPLETED:
            raise InvalidStateError("You can only review completed contracts.")
        if reviewer_id == contract.client_id:
            reviewee_id = contract.freelancer_id
        elif reviewer_id == contract.freelancer_id:
            reviewee_id = contract.client_id
        else:
            raise UnauthorizedError("You are not part of this contract.")
        if self.get_review(contract_id, reviewer_id) is not None:
            raise DuplicateReviewError("You have already reviewed this contract.")

        review = Review(
            contract_id=contract_id,
            reviewer_id=reviewer_id,
            reviewee_id=reviewee_id,
            rating=rating,
            comment=(comment or "").strip() or None,
            created_at=self._now(),
        )
        try:
            self.session.add(review)
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise DuplicateReviewError("You have already reviewed this contract.")
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error creating review for contract {contract_id}: {e}")
            raise
        self.session.refresh(review)

        logger.info(f"Review {review.id} left on contract {contract_id} by {reviewer_id}")
        return review

    def get_review(self, contract_id: int, reviewer_id: str) -> Optional[Review]:
        return self.session.exec(
            select(Review).where(
                Review.contract_id == contract_id, Review.reviewer_id == reviewer_id
            )
        ).first()

    def list_reviews_for_contract(self, contract_id: int) -> List[Review]:
        return list(
            self.session.exec(select(Review).where(Review.contract_id == contract_id)).all()
        )

    def list_reviews_for_user(self, user_id: str) -> List[Review]:
        """Reviews received by ``user_id``, newest first"""
        statement = (
            select(Review)
            .where(Review.reviewee_id == user_id)
            .order_by(Review.created_at.desc())
        )
        return list(self.session.exec(statement).all())

    def average_rating(self, user_id: str) -> Optional[float]:
        average = self.session.exec(
            select(func.avg(Review.rating)).where(Review.reviewee_id == user_id)
        ).one()
        return round(float(average), 2) if average is not None else None
