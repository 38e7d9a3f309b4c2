# app/services/marketplace/payment_service.py
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, List, Optional

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.core.errors import (
    InvalidStateError,
    NotFoundError,
    StaleStateError,
    UnauthorizedError,
    ValidationError,
)
from app.db.models import (
    Contract,
    ContractStatus,
    PaymentStatus,
    PaymentTransaction,
    PaymentType,
)
from app.services.marketplace.transitions import guarded_update
from app.services.marketplace.validation import CENT, validate_amount

logger = logging.getLogger(__name__)

OPEN_PAYMENT_STATUSES = (PaymentStatus.PENDING, PaymentStatus.PROCESSING)
CLIENT_PAYMENT_TYPES = (PaymentType.DEPOSIT, PaymentType.MILESTONE)
ZERO = Decimal("0.00")


@dataclass
class EarningsSummary:
    """Completed and pending money for one user, from their payment transactions"""
    user_id: str
    as_client: bool
    total: Decimal
    this_month: Decimal
    last_month: Decimal
    pending: Decimal
    percentage_change: Optional[Decimal]
    completed_count: int


def completed_amount(session: Session, contract_id: int) -> Decimal:
    """Sum of completed non-refund payments on a contract"""
    total = session.exec(
        select(func.coalesce(func.sum(PaymentTransaction.amount), 0)).where(
            PaymentTransaction.contract_id == contract_id,
            PaymentTransaction.status == PaymentStatus.COMPLETED,
            PaymentTransaction.type != PaymentType.REFUND,
        )
    ).one()
    return Decimal(str(total)).quantize(CENT)


def settle_on_completion(session: Session, contract: Contract, now: datetime) -> Optional[PaymentTransaction]:
    """
    Stage the payments that close out a completed contract.

    Open deposits and milestones are marked failed, and a completed FINAL
    payment covers whatever part of the agreed amount is still unpaid. Runs
    inside the caller's transaction; returns the final payment, or None when
    the contract was already paid in full.
    """
    session.exec(
        update(PaymentTransaction)
        .where(
            PaymentTransaction.contract_id == contract.id,
            PaymentTransaction.status.in_(OPEN_PAYMENT_STATUSES),
        )
        .values(status=PaymentStatus.FAILED, processed_at=now)
        .execution_options(synchronize_session=False)
    )
    remaining = Decimal(contract.agreed_amount) - completed_amount(session, contract.id)
    if remaining <= 0:
        return None
    payment = PaymentTransaction(
        contract_id=contract.id,
        amount=remaining.quantize(CENT),
        status=PaymentStatus.COMPLETED,
        type=PaymentType.FINAL,
        description="Final payment on contract completion",
        processed_at=now,
        created_at=now,
    )
    session.add(payment)
    return payment


def _month_start(moment: datetime) -> datetime:
    return datetime(moment.year, moment.month, 1)


def _previous_month_start(moment: datetime) -> datetime:
    if moment.month == 1:
        return datetime(moment.year - 1, 12, 1)
    return datetime(moment.year, moment.month - 1, 1)


class PaymentService:
    """Payments a client makes against a contract, and the earnings derived from them"""

    def __init__(self, session: Session, now: Optional[Callable[[], datetime]] = None):
        self.session = session
        self._now = now or datetime.utcnow

    def get_payment(self, payment_id: int) -> PaymentTransaction:
        payment = self.session.get(PaymentTransaction, payment_id)
        if payment is None:
            raise NotFoundError("Payment not found")
        return payment

    def list_payments_for_contract(self, contract_id: int, user_id: str) -> List[PaymentTransaction]:
        contract = self._get_contract(contract_id)
        if user_id not in (contract.client_id, contract.freelancer_id):
            raise UnauthorizedError("You don't have permission to view payments for this contract")
        statement = (
            select(PaymentTransaction)
            .where(PaymentTransaction.contract_id == contract_id)
            .order_by(PaymentTransaction.created_at.desc(), PaymentTransaction.id.desc())
        )
        return list(self.session.exec(statement).all())

    def record_payment(
        self,
        contract_id: int,
        acting_client_id: str,
        amount,
        payment_type: PaymentType = PaymentType.MILESTONE,
        description: Optional[str] = None,
        transaction_id: Optional[str] = None,
    ) -> PaymentTransaction:
        """Register a pending deposit or milestone payment on an active contract"""
        amount = validate_amount(amount, "amount")
        if payment_type not in CLIENT_PAYMENT_TYPES:
            raise ValidationError("Only deposit and milestone payments can be recorded")
        description = (description or "").strip() or None
        if description is not None and len(description) > 500:
            raise ValidationError("description must be at most 500 characters")

        contract = self._get_contract(contract_id)
        if contract.client_id != acting_client_id:
            raise UnauthorizedError("Only the contract's client can record payments")
        if contract.status != ContractStatus.ACTIVE:
            raise InvalidStateError(f"Contract is {contract.status.value}; payments can no longer be recorded")

        committed = self.session.exec(
            select(func.coalesce(func.sum(PaymentTransaction.amount), 0)).where(
                PaymentTransaction.contract_id == contract_id,
                PaymentTransaction.type != PaymentType.REFUND,
                PaymentTransaction.status.in_(
                    OPEN_PAYMENT_STATUSES + (PaymentStatus.COMPLETED,)
                ),
            )
        ).one()
        if Decimal(str(committed)) + amount > Decimal(contract.agreed_amount):
            raise ValidationError("Payments cannot exceed the contract's agreed amount")

        payment = PaymentTransaction(
            contract_id=contract_id,
            amount=amount,
            status=PaymentStatus.PENDING,
            type=payment_type,
            description=description,
            transaction_id=(transaction_id or "").strip() or None,
            created_at=self._now(),
        )
        try:
            self.session.add(payment)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error recording payment on contract {contract_id}: {e}")
            raise
        self.session.refresh(payment)
        logger.info(f"Payment {payment.id} of {amount} recorded on contract {contract_id}")
        return payment

    def complete_payment(self, payment_id: int, acting_client_id: str) -> PaymentTransaction:
        return self._settle(payment_id, acting_client_id, PaymentStatus.COMPLETED)

    def fail_payment(self, payment_id: int, acting_client_id: str) -> PaymentTransaction:
        return self._settle(payment_id, acting_client_id, PaymentStatus.FAILED)

    def earnings_summary(self, user_id: str, as_client: bool = False) -> EarningsSummary:
        """
        Earnings of a freelancer, or spending of a client, over their contracts.

        Totals count completed non-refund payments; ``pending`` counts
        payments still pending or processing.
        """
        party = Contract.client_id if as_client else Contract.freelancer_id
        payments = self.session.exec(
            select(PaymentTransaction)
            .join(Contract, Contract.id == PaymentTransaction.contract_id)
            .where(party == user_id)
        ).all()

        now = self._now()
        month_start = _month_start(now)
        last_month_start = _previous_month_start(now)

        earned = [
            p for p in payments
            if p.status == PaymentStatus.COMPLETED and p.type != PaymentType.REFUND
        ]
        total = sum((Decimal(p.amount) for p in earned), ZERO)
        this_month = sum((Decimal(p.amount) for p in earned if p.created_at >= month_start), ZERO)
        last_month = sum(
            (Decimal(p.amount) for p in earned if last_month_start <= p.created_at < month_start),
            ZERO,
        )
        pending = sum(
            (Decimal(p.amount) for p in payments if p.status in OPEN_PAYMENT_STATUSES), ZERO
        )
        percentage_change = None
        if last_month > 0:
            percentage_change = ((this_month - last_month) / last_month * 100).quantize(CENT)

        return EarningsSummary(
            user_id=user_id,
            as_client=as_client,
            total=total.quantize(CENT),
            this_month=this_month.quantize(CENT),
            last_month=last_month.quantize(CENT),
            pending=pending.quantize(CENT),
            percentage_change=percentage_change,
            completed_count=len(earned),
        )

    def _get_contract(self, contract_id: int) -> Contract:
        contract = self.session.get(Contract, contract_id)
        if contract is None:
            raise NotFoundError("Contract not found")
        return contract

    def _settle(self, payment_id: int, acting_client_id: str, target: PaymentStatus) -> PaymentTransaction:
        payment = self.get_payment(payment_id)
        contract = self._get_contract(payment.contract_id)
        if contract.client_id != acting_client_id:
            raise UnauthorizedError("Only the contract's client can settle payments")
        if payment.status == target:
            return payment
        if payment.status not in OPEN_PAYMENT_STATUSES:
            raise InvalidStateError(f"Payment is {payment.status.value} and cannot be {target.value}")
        if target == PaymentStatus.COMPLETED and contract.status != ContractStatus.ACTIVE:
            raise InvalidStateError(f"Contract is {contract.status.value}; payments can no longer be completed")

        now = self._now()
        try:
            guarded_update(
                self.session, PaymentTransaction, payment.id, OPEN_PAYMENT_STATUSES,
                {"status": target, "processed_at": now},
            )
            self.session.commit()
        except StaleStateError:
            self.session.rollback()
            raise
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error settling payment {payment_id}: {e}")
            raise
        self.session.refresh(payment)
        logger.info(f"Payment {payment_id} {target.value} by client {acting_client_id}")
        return payment
