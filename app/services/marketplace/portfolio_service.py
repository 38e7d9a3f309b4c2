# app/services/marketplace/portfolio_service.py
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from app.core.errors import (
    DuplicatePortfolioError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from app.db.models import Portfolio, PortfolioCase
from app.services.marketplace.validation import validate_amount, validate_text

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 200

PORTFOLIO_FIELDS = (
    "title", "description", "detailed_bio", "profile_image_url", "cover_image_url", "is_public",
)
CASE_FIELDS = (
    "title", "description", "detailed_description", "client_name", "industry",
    "project_url", "budget_amount", "completion_date", "technologies", "display_order",
)


class PortfolioService:
    """
    Freelancer portfolios and the case studies inside them.

    A freelancer has at most one live portfolio. Deleting it is a soft delete,
    after which a new one may be created. Views by anyone but the owner bump
    ``view_count`` with a single UPDATE so concurrent viewers are all counted.
    """

    def __init__(self, session: Session, now: Optional[Callable[[], datetime]] = None):
        self.session = session
        self._now = now or datetime.utcnow

    # ------------------------------------------------------------------
    # Portfolios
    # ------------------------------------------------------------------

    def get_portfolio(self, portfolio_id: int) -> Portfolio:
        portfolio = self.session.get(Portfolio, portfolio_id)
        if portfolio is None or portfolio.is_deleted:
            raise NotFoundError("Portfolio not found")
        return portfolio

    def view_portfolio(self, portfolio_id: int, viewer_id: Optional[str] = None) -> Portfolio:
        """Public portfolio page; private portfolios are only visible to their owner"""
        portfolio = self.get_portfolio(portfolio_id)
        if portfolio.freelancer_id == viewer_id:
            return portfolio
        if not portfolio.is_public:
            raise NotFoundError("Portfolio not found")
        self._bump_views(Portfolio, portfolio_id)
        self.session.refresh(portfolio)
        return portfolio

    def get_freelancer_portfolio(self, freelancer_id: str) -> Optional[Portfolio]:
        return self.session.exec(
            select(Portfolio).where(
                Portfolio.freelancer_id == freelancer_id,
                Portfolio.is_deleted == False,  # noqa: E712
            )
        ).first()

    def list_public_portfolios(
        self, featured_only: bool = False, page: int = 1, page_size: int = 20
    ) -> Tuple[List[Portfolio], int]:
        """Public portfolios, most viewed first; returns (page items, total count)"""
        filters = [Portfolio.is_public == True, Portfolio.is_deleted == False]  # noqa: E712
        if featured_only:
            filters.append(Portfolio.is_featured == True)  # noqa: E712

        total = self.session.exec(select(func.count(Portfolio.id)).where(*filters)).one()
        page = max(page, 1)
        statement = (
            select(Portfolio)
            .where(*filters)
            .order_by(Portfolio.view_count.desc(), Portfolio.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return list(self.session.exec(statement).all()), total

    def create_portfolio(
        self,
        freelancer_id: str,
        title: str,
        description: Optional[str] = None,
        detailed_bio: Optional[str] = None,
        profile_image_url: Optional[str] = None,
        cover_image_url: Optional[str] = None,
        is_public: bool = True,
    ) -> Portfolio:
        if self.get_freelancer_portfolio(freelancer_id) is not None:
            raise DuplicatePortfolioError("You already have a portfolio")

        now = self._now()
        portfolio = Portfolio(
            freelancer_id=freelancer_id,
            title=validate_text(title, "title", max_length=TITLE_MAX_LENGTH),
            description=_optional(description),
            detailed_bio=_optional(detailed_bio),
            profile_image_url=_optional(profile_image_url),
            cover_image_url=_optional(cover_image_url),
            is_public=is_public,
            published_at=now if is_public else None,
            created_at=now,
            updated_at=now,
        )
        try:
            self.session.add(portfolio)
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise DuplicatePortfolioError("You already have a portfolio")
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error creating portfolio for {freelancer_id}: {e}")
            raise
        self.session.refresh(portfolio)
        logger.info(f"Portfolio {portfolio.id} created by freelancer {freelancer_id}")
        return portfolio

    def update_portfolio(self, portfolio_id: int, acting_freelancer_id: str, **changes: Any) -> Portfolio:
        """Owner edits; keys left out or None are unchanged"""
        portfolio = self._get_owned(portfolio_id, acting_freelancer_id)
        changes = _known(changes, PORTFOLIO_FIELDS)
        if "title" in changes:
            changes["title"] = validate_text(changes["title"], "title", max_length=TITLE_MAX_LENGTH)
        for field, value in changes.items():
            setattr(portfolio, field, value)
        if portfolio.is_public and portfolio.published_at is None:
            portfolio.published_at = self._now()
        portfolio.updated_at = self._now()
        return self._save(portfolio, f"updating portfolio {portfolio_id}")

    def set_featured(self, portfolio_id: int, featured: bool) -> Portfolio:
        """Admin curation of the featured list"""
        portfolio = self.get_portfolio(portfolio_id)
        portfolio.is_featured = featured
        portfolio.updated_at = self._now()
        portfolio = self._save(portfolio, f"featuring portfolio {portfolio_id}")
        logger.info(f"Portfolio {portfolio_id} featured={featured}")
        return portfolio

    def delete_portfolio(self, portfolio_id: int, acting_freelancer_id: str) -> bool:
        portfolio = self._get_owned(portfolio_id, acting_freelancer_id)
        portfolio.is_deleted = True
        portfolio.updated_at = self._now()
        self._save(portfolio, f"deleting portfolio {portfolio_id}")
        logger.info(f"Portfolio {portfolio_id} deleted by freelancer {acting_freelancer_id}")
        return True

    # ------------------------------------------------------------------
    # Cases
    # ------------------------------------------------------------------

    def list_cases(self, portfolio_id: int, viewer_id: Optional[str] = None) -> List[PortfolioCase]:
        self._get_visible(portfolio_id, viewer_id)
        statement = (
            select(PortfolioCase)
            .where(PortfolioCase.portfolio_id == portfolio_id)
            .order_by(PortfolioCase.display_order, PortfolioCase.id)
        )
        return list(self.session.exec(statement).all())

    def view_case(self, case_id: int, viewer_id: Optional[str] = None) -> PortfolioCase:
        case = self._get_case(case_id)
        portfolio = self._get_visible(case.portfolio_id, viewer_id)
        if portfolio.freelancer_id != viewer_id:
            self._bump_views(PortfolioCase, case_id)
            self.session.refresh(case)
        return case

    def add_case(self, portfolio_id: int, acting_freelancer_id: str, title: str, **details: Any) -> PortfolioCase:
        self._get_owned(portfolio_id, acting_freelancer_id)
        details = _known(details, CASE_FIELDS)
        now = self._now()
        case = PortfolioCase(
            portfolio_id=portfolio_id,
            title=validate_text(title, "title", max_length=TITLE_MAX_LENGTH),
            **_clean_case(details),
            created_at=now,
            updated_at=now,
        )
        case = self._save(case, f"adding case to portfolio {portfolio_id}")
        logger.info(f"Case {case.id} added to portfolio {portfolio_id}")
        return case

    def update_case(self, case_id: int, acting_freelancer_id: str, **changes: Any) -> PortfolioCase:
        case = self._get_case(case_id)
        self._get_owned(case.portfolio_id, acting_freelancer_id)
        changes = _known(changes, CASE_FIELDS)
        if "title" in changes:
            changes["title"] = validate_text(changes["title"], "title", max_length=TITLE_MAX_LENGTH)
        for field, value in _clean_case(changes).items():
            setattr(case, field, value)
        case.updated_at = self._now()
        return self._save(case, f"updating case {case_id}")

    def delete_case(self, case_id: int, acting_freelancer_id: str) -> bool:
        case = self._get_case(case_id)
        self._get_owned(case.portfolio_id, acting_freelancer_id)
        try:
            self.session.delete(case)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error deleting case {case_id}: {e}")
            raise
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_owned(self, portfolio_id: int, acting_freelancer_id: str) -> Portfolio:
        portfolio = self.get_portfolio(portfolio_id)
        if portfolio.freelancer_id != acting_freelancer_id:
            raise UnauthorizedError("You are not authorized to perform this action.")
        return portfolio

    def _get_visible(self, portfolio_id: int, viewer_id: Optional[str]) -> Portfolio:
        portfolio = self.get_portfolio(portfolio_id)
        if not portfolio.is_public and portfolio.freelancer_id != viewer_id:
            raise NotFoundError("Portfolio not found")
        return portfolio

    def _get_case(self, case_id: int) -> PortfolioCase:
        case = self.session.get(PortfolioCase, case_id)
        if case is None:
            raise NotFoundError("Portfolio case not found")
        return case

    def _bump_views(self, model, entity_id: int) -> None:
        try:
            self.session.exec(
                update(model)
                .where(model.id == entity_id)
                .values(view_count=model.view_count + 1)
                .execution_options(synchronize_session=False)
            )
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error counting view of {model.__name__} {entity_id}: {e}")
            raise

    def _save(self, entity, action: str):
        try:
            self.session.add(entity)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error {action}: {e}")
            raise
        self.session.refresh(entity)
        return entity


def _optional(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None


def _known(values: Dict[str, Any], allowed) -> Dict[str, Any]:
    return {k: v for k, v in values.items() if k in allowed and v is not None}


def _clean_case(values: Dict[str, Any]) -> Dict[str, Any]:
    values = dict(values)
    if values.get("budget_amount") is not None:
        values["budget_amount"] = validate_amount(values["budget_amount"], "budget_amount")
    if values.get("display_order") is not None and values["display_order"] < 0:
        raise ValidationError("display_order must not be negative")
    return values
