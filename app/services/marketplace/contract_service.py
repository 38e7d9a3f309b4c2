# app/services/marketplace/contract_service.py
import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from app.core.errors import (
    DuplicateContractError,
    InvalidStateError,
    NotFoundError,
    StaleStateError,
    UnauthorizedError,
    ValidationError,
)
from app.db.models import Bid, Contract, ContractStatus, Project, ProjectStatus
from app.services.marketplace.payment_service import settle_on_completion
from app.services.marketplace.transitions import guarded_update
from app.services.marketplace.validation import validate_amount, validate_text

logger = logging.getLogger(__name__)


def contract_from_bid(bid: Bid, project: Project, now: datetime) -> Contract:
    """Active contract seeded from an accepted bid's terms"""
    return Contract(
        project_id=project.id,
        bid_id=bid.id,
        client_id=project.client_id,
        freelancer_id=bid.freelancer_id,
        agreed_amount=bid.proposed_amount,
        start_date=now,
        end_date=now + timedelta(days=bid.estimated_duration_days),
        status=ContractStatus.ACTIVE,
        created_at=now,
        updated_at=now,
    )


class ContractService:
    """Contract creation and the Active -> Completed/Cancelled/Disputed transitions"""

    def __init__(self, session: Session, now: Optional[Callable[[], datetime]] = None):
        self.session = session
        self._now = now or datetime.utcnow

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_contract(self, contract_id: int) -> Contract:
        contract = self.session.get(Contract, contract_id)
        if contract is None:
            raise NotFoundError("Contract not found")
        return contract

    def get_contract_for_party(self, contract_id: int, user_id: str) -> Contract:
        """Contract details, visible only to its client and freelancer"""
        contract = self.get_contract(contract_id)
        self._require_party(contract, user_id, "view")
        return contract

    def get_contract_for_project(self, project_id: int) -> Optional[Contract]:
        return self.session.exec(
            select(Contract).where(Contract.project_id == project_id)
        ).first()

    def list_contracts_for_user(
        self, user_id: str, status: Optional[ContractStatus] = None
    ) -> List[Contract]:
        statement = select(Contract).where(
            or_(Contract.client_id == user_id, Contract.freelancer_id == user_id)
        )
        if status is not None:
            statement = statement.where(Contract.status == status)
        statement = statement.order_by(Contract.created_at.desc())
        return list(self.session.exec(statement).all())


    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_contract(
        self,
        project_id: int,
        freelancer_id: str,
        amount,
        start_date: datetime,
        end_date: Optional[datetime],
        terms: Optional[str],
        acting_client_id: str,
    ) -> Contract:
        """Create the project's contract directly, without going through a bid"""
        agreed_amount = validate_amount(amount, "amount")
        freelancer_id = validate_text(freelancer_id, "freelancer_id", max_length=100)
        if start_date is None:
            raise ValidationError("start_date is required")
        if end_date is not None and end_date < start_date:
            raise ValidationError("end_date must not be before start_date")

        project = self.session.get(Project, project_id)
        if project is None or project.is_deleted:
            raise NotFoundError("Project not found")
        if project.client_id != acting_client_id:
            raise UnauthorizedError("You don't have permission to create a contract for this project")
        if freelancer_id == project.client_id:
            raise ValidationError("A client cannot contract themselves")
        if self.get_contract_for_project(project_id) is not None:
            raise DuplicateContractError("Contract already exists for this project")
        if project.status not in (ProjectStatus.OPEN, ProjectStatus.IN_PROGRESS):
            raise InvalidStateError(f"Project is {project.status.value}; contracts can no longer be created")

        now = self._now()
        contract = Contract(
            project_id=project_id,
            client_id=project.client_id,
            freelancer_id=freelancer_id,
            agreed_amount=agreed_amount,
            start_date=start_date,
            end_date=end_date,
            terms=(terms or "").strip() or None,
            status=ContractStatus.ACTIVE,
            created_at=now,
            updated_at=now,
        )
        try:
            self.session.add(contract)
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise DuplicateContractError("Contract already exists for this project")
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error creating contract for project {project_id}: {e}")
            raise
        self.session.refresh(contract)

        logger.info(f"Contract created: {contract.id} for project {project_id}")
        return contract

    def complete_contract(self, contract_id: int, acting_user_id: str) -> bool:
        """
        Mark the contract Completed; the project follows InProgress -> Completed
        and the unpaid balance is recorded as a completed final payment.
        """
        contract = self.get_contract(contract_id)
        self._require_party(contract, acting_user_id, "complete")
        if contract.status == ContractStatus.COMPLETED:
            logger.info(f"Contract {contract_id} already completed; replay by {acting_user_id}")
            return True
        self._require_active(contract, "completed")

        now = self._now()
        try:
            guarded_update(
                self.session, Contract, contract.id, [ContractStatus.ACTIVE],
                {"status": ContractStatus.COMPLETED, "updated_at": now},
            )
            self.session.exec(
                update(Project)
                .where(Project.id == contract.project_id, Project.status == ProjectStatus.IN_PROGRESS)
                .values(status=ProjectStatus.COMPLETED, updated_at=now)
                .execution_options(synchronize_session=False)
            )
            final_payment = settle_on_completion(self.session, contract, now)
            self.session.commit()
        except StaleStateError:
            self.session.rollback()
            raise
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error completing contract {contract_id}: {e}")
            raise

        if final_payment is not None:
            logger.info(f"Final payment of {final_payment.amount} recorded on contract {contract_id}")
        logger.info(f"Contract {contract_id} marked as completed by user {acting_user_id}")
        return True

    def cancel_contract(self, contract_id: int, acting_user_id: str) -> bool:
        contract = self.get_contract(contract_id)
        self._require_party(contract, acting_user_id, "cancel")
        if contract.status == ContractStatus.CANCELLED:
            logger.info(f"Contract {contract_id} already cancelled; replay by {acting_user_id}")
            return True
        self._require_active(contract, "cancelled")
        self._transition(contract, ContractStatus.CANCELLED)
        logger.info(f"Contract {contract_id} cancelled by user {acting_user_id}")
        return True

    def dispute_contract(self, contract_id: int, acting_user_id: str) -> bool:
        """Hand an active contract over to external arbitration"""
        contract = self.get_contract(contract_id)
        self._require_party(contract, acting_user_id, "dispute")
        if contract.status == ContractStatus.DISPUTED:
            return True
        self._require_active(contract, "disputed")
        self._transition(contract, ContractStatus.DISPUTED)
        logger.warning(f"Contract {contract_id} disputed by user {acting_user_id}")
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_party(self, contract: Contract, user_id: str, action: str) -> None:
        if user_id not in (contract.client_id, contract.freelancer_id):
            raise UnauthorizedError(f"You don't have permission to {action} this contract")

    def _require_active(self, contract: Contract, target: str) -> None:
        if contract.status != ContractStatus.ACTIVE:
            raise InvalidStateError(
                f"Contract is {contract.status.value} and cannot be {target}"
            )

    def _transition(self, contract: Contract, new_status: ContractStatus) -> None:
        try:
            guarded_update(
                self.session, Contract, contract.id, [ContractStatus.ACTIVE],
                {"status": new_status, "updated_at": self._now()},
            )
            self.session.commit()
        except StaleStateError:
            self.session.rollback()
            raise
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error updating contract {contract.id}: {e}")
            raise
