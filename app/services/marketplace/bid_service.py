# app/services/marketplace/bid_service.py
import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from app.core.config import settings
from app.core.errors import (
    DuplicateBidError,
    DuplicateContractError,
    InvalidStateError,
    NotFoundError,
    StaleStateError,
    UnauthorizedError,
)
from app.db.models import Bid, BidStatus, Contract, Project, ProjectStatus
from app.services.marketplace.contract_service import contract_from_bid
from app.services.marketplace.transitions import guarded_update
from app.services.marketplace.validation import (
    validate_amount,
    validate_int_range,
    validate_text,
)

logger = logging.getLogger(__name__)


class BidService:
    """
    Bid submission and the client/freelancer decisions on a bid.

    Accepting a bid moves the project to InProgress and creates its contract
    in the same transaction. Competing pending bids are left untouched unless
    ``auto_reject_competing_bids`` is set.
    """

    def __init__(
        self,
        session: Session,
        now: Optional[Callable[[], datetime]] = None,
        auto_reject_competing_bids: Optional[bool] = None,
    ):
        self.session = session
        self._now = now or datetime.utcnow
        if auto_reject_competing_bids is None:
            auto_reject_competing_bids = settings.AUTO_REJECT_COMPETING_BIDS
        self.auto_reject_competing_bids = auto_reject_competing_bids

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_bid(self, bid_id: int) -> Bid:
        bid = self.session.get(Bid, bid_id)
        if bid is None:
            raise NotFoundError("Bid not found")
        return bid

    def list_bids_for_project(self, project_id: int) -> List[Bid]:
        statement = (
            select(Bid)
            .where(Bid.project_id == project_id)
            .order_by(Bid.created_at.desc())
        )
        return list(self.session.exec(statement).all())

    def list_bids_for_freelancer(self, freelancer_id: str) -> List[Bid]:
        statement = (
            select(Bid)
            .where(Bid.freelancer_id == freelancer_id)
            .order_by(Bid.created_at.desc())
        )
        return list(self.session.exec(statement).all())

    def list_bids_visible_to(self, project_id: int, viewer_id: str) -> List[Bid]:
        """All bids for the project owner; anyone else sees only their own bids"""
        project = self._get_project(project_id)
        statement = select(Bid).where(Bid.project_id == project_id)
        if project.client_id != viewer_id:
            statement = statement.where(Bid.freelancer_id == viewer_id)
        return list(self.session.exec(statement.order_by(Bid.created_at.desc())).all())

    def _get_project(self, project_id: int) -> Project:
        project = self.session.get(Project, project_id)
        if project is None or project.is_deleted:
            raise NotFoundError("Project not found")
        return project

    def _get_bid_and_project(self, bid_id: int):
        bid = self.get_bid(bid_id)
        return bid, self._get_project(bid.project_id)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def submit_bid(
        self,
        project_id: int,
        freelancer_id: str,
        proposed_amount,
        estimated_duration_days: int,
        cover_letter: str,
    ) -> Bid:
        amount = validate_amount(proposed_amount, "proposed_amount")
        duration = validate_int_range(
            estimated_duration_days, 1, settings.MAX_BID_DURATION_DAYS, "estimated_duration_days"
        )
        cover_letter = validate_text(cover_letter, "cover_letter")

        project = self._get_project(project_id)
        if project.status != ProjectStatus.OPEN:
            raise InvalidStateError("Project is not accepting bids")
        if project.client_id == freelancer_id:
            raise UnauthorizedError("You cannot bid on your own project")

        existing = self.session.exec(
            select(Bid).where(
                Bid.project_id == project_id,
                Bid.freelancer_id == freelancer_id,
                Bid.status != BidStatus.WITHDRAWN,
            )
        ).first()
        if existing is not None:
            raise DuplicateBidError("You have already submitted a bid for this project")

        now = self._now()
        bid = Bid(
            project_id=project_id,
            freelancer_id=freelancer_id,
            proposed_amount=amount,
            estimated_duration_days=duration,
            cover_letter=cover_letter,
            status=BidStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        try:
            self.session.add(bid)
            self.session.commit()
        except IntegrityError:
            # Concurrent submission by the same freelancer
            self.session.rollback()
            raise DuplicateBidError("You have already submitted a bid for this project")
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error creating bid on project {project_id}: {e}")
            raise
        self.session.refresh(bid)

        logger.info(f"Bid {bid.id} submitted on project {project_id} by {freelancer_id}")
        return bid

    def accept_bid(self, bid_id: int, acting_client_id: str) -> Bid:
        bid, project = self._get_bid_and_project(bid_id)
        if project.client_id != acting_client_id:
            raise UnauthorizedError("You are not authorized to perform this action.")
        if bid.status == BidStatus.ACCEPTED:
            logger.info(f"Bid {bid_id} already accepted; replay by {acting_client_id}")
            return bid
        self._require_pending(bid, "accepted")
        if project.status != ProjectStatus.OPEN:
            raise InvalidStateError(f"Project is {project.status.value}; no further bids can be accepted")
        existing = self.session.exec(
            select(Contract).where(Contract.project_id == project.id)
        ).first()
        if existing is not None:
            raise DuplicateContractError("Contract already exists for this project")

        now = self._now()
        try:
            guarded_update(
                self.session, Bid, bid.id, [BidStatus.PENDING],
                {"status": BidStatus.ACCEPTED, "updated_at": now},
            )
            guarded_update(
                self.session, Project, project.id, [ProjectStatus.OPEN],
                {"status": ProjectStatus.IN_PROGRESS, "updated_at": now},
            )
            contract = contract_from_bid(bid, project, now)
            self.session.add(contract)
            if self.auto_reject_competing_bids:
                self.session.exec(
                    update(Bid)
                    .where(
                        Bid.project_id == project.id,
                        Bid.id != bid.id,
                        Bid.status == BidStatus.PENDING,
                    )
                    .values(status=BidStatus.REJECTED, updated_at=now)
                    .execution_options(synchronize_session=False)
                )
            self.session.commit()
        except StaleStateError:
            self.session.rollback()
            raise
        except IntegrityError:
            self.session.rollback()
            raise DuplicateContractError("Contract already exists for this project")
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error accepting bid {bid_id}: {e}")
            raise
        self.session.refresh(bid)

        logger.info(
            f"Bid {bid_id} accepted by {acting_client_id}; project {project.id} in progress, "
            f"contract {contract.id} created"
        )
        return bid

    def reject_bid(self, bid_id: int, acting_client_id: str) -> Bid:
        bid, project = self._get_bid_and_project(bid_id)
        if project.client_id != acting_client_id:
            raise UnauthorizedError("You are not authorized to perform this action.")
        if bid.status == BidStatus.REJECTED:
            return bid
        self._require_pending(bid, "rejected")
        self._transition(bid, BidStatus.REJECTED)
        self.session.refresh(bid)
        logger.info(f"Bid {bid_id} rejected by {acting_client_id}")
        return bid

    def withdraw_bid(self, bid_id: int, acting_freelancer_id: str) -> bool:
        bid = self.get_bid(bid_id)
        if bid.freelancer_id != acting_freelancer_id:
            raise UnauthorizedError("You are not authorized to perform this action.")
        if bid.status == BidStatus.WITHDRAWN:
            return True
        self._require_pending(bid, "withdrawn")
        self._transition(bid, BidStatus.WITHDRAWN)
        logger.info(f"Bid {bid_id} withdrawn by {acting_freelancer_id}")
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_pending(self, bid: Bid, target: str) -> None:
        if bid.status != BidStatus.PENDING:
            raise InvalidStateError(f"Bid is {bid.status.value} and cannot be {target}")

    def _transition(self, bid: Bid, new_status: BidStatus) -> None:
        try:
            guarded_update(
                self.session, Bid, bid.id, [BidStatus.PENDING],
                {"status": new_status, "updated_at": self._now()},
            )
            self.session.commit()
        except StaleStateError:
            self.session.rollback()
            raise
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error updating bid {bid.id}: {e}")
            raise
