from decimal import Decimal

import pytest

from app.core.errors import InvalidStateError, NotFoundError, UnauthorizedError, ValidationError
from app.db.models import PaymentStatus, PaymentTransaction, PaymentType
from app.services.marketplace import BidService, ContractService, PaymentService


@pytest.fixture
def payment_service(session, clock):
    return PaymentService(session, now=clock)


@pytest.fixture
def active_contract(session, clock, make_project):
    """Contract for 900.00 between client-1 and freelancer-1"""
    project = make_project()
    bids = BidService(session, now=clock)
    bid = bids.submit_bid(project.id, "freelancer-1", "900.00", 10, "Ready to start")
    bids.accept_bid(bid.id, "client-1")
    return ContractService(session, now=clock).get_contract_for_project(project.id)


def test_record_and_complete_payment(payment_service, active_contract, clock):
    payment = payment_service.record_payment(
        active_contract.id, "client-1", "200.00", PaymentType.DEPOSIT, description="Upfront"
    )
    assert payment.status == PaymentStatus.PENDING
    assert payment.processed_at is None

    clock.advance(hours=1)
    completed = payment_service.complete_payment(payment.id, "client-1")

    assert completed.status == PaymentStatus.COMPLETED
    assert completed.processed_at == clock()
    assert payment_service.complete_payment(payment.id, "client-1").status == PaymentStatus.COMPLETED


def test_only_the_client_records_on_active_contracts(payment_service, active_contract, session, clock):
    with pytest.raises(UnauthorizedError):
        payment_service.record_payment(active_contract.id, "freelancer-1", "50.00")

    ContractService(session, now=clock).cancel_contract(active_contract.id, "client-1")
    with pytest.raises(InvalidStateError):
        payment_service.record_payment(active_contract.id, "client-1", "50.00")
    with pytest.raises(NotFoundError):
        payment_service.record_payment(9999, "client-1", "50.00")


@pytest.mark.parametrize("amount,payment_type", [
    ("0", PaymentType.MILESTONE),
    ("10.001", PaymentType.MILESTONE),
    ("50.00", PaymentType.FINAL),
    ("50.00", PaymentType.REFUND),
    ("900.01", PaymentType.DEPOSIT),
])
def test_record_payment_validation(payment_service, active_contract, amount, payment_type):
    with pytest.raises(ValidationError):
        payment_service.record_payment(active_contract.id, "client-1", amount, payment_type)


def test_payments_cannot_exceed_agreed_amount(payment_service, active_contract):
    payment_service.record_payment(active_contract.id, "client-1", "600.00")
    failed = payment_service.record_payment(active_contract.id, "client-1", "300.00")
    payment_service.fail_payment(failed.id, "client-1")

    with pytest.raises(ValidationError):
        payment_service.record_payment(active_contract.id, "client-1", "300.01")
    assert payment_service.record_payment(active_contract.id, "client-1", "300.00").amount == Decimal("300.00")


def test_settled_payment_cannot_change(payment_service, active_contract):
    payment = payment_service.record_payment(active_contract.id, "client-1", "100.00")
    payment_service.fail_payment(payment.id, "client-1")

    with pytest.raises(InvalidStateError):
        payment_service.complete_payment(payment.id, "client-1")
    with pytest.raises(UnauthorizedError):
        payment_service.fail_payment(payment.id, "freelancer-1")


def test_list_payments_is_party_only(payment_service, active_contract):
    payment_service.record_payment(active_contract.id, "client-1", "100.00")

    assert len(payment_service.list_payments_for_contract(active_contract.id, "freelancer-1")) == 1
    with pytest.raises(UnauthorizedError):
        payment_service.list_payments_for_contract(active_contract.id, "client-2")


def test_earnings_come_from_transactions(payment_service, active_contract, session, clock):
    deposit = payment_service.record_payment(active_contract.id, "client-1", "200.00", PaymentType.DEPOSIT)
    payment_service.complete_payment(deposit.id, "client-1")
    clock.advance(days=31)
    milestone = payment_service.record_payment(active_contract.id, "client-1", "300.00")
    payment_service.complete_payment(milestone.id, "client-1")
    payment_service.record_payment(active_contract.id, "client-1", "100.00")
    session.add(PaymentTransaction(
        contract_id=active_contract.id,
        amount=Decimal("50.00"),
        status=PaymentStatus.COMPLETED,
        type=PaymentType.REFUND,
        created_at=clock(),
    ))
    session.commit()

    summary = payment_service.earnings_summary("freelancer-1")

    assert summary.total == Decimal("500.00")
    assert summary.this_month == Decimal("300.00")
    assert summary.last_month == Decimal("200.00")
    assert summary.pending == Decimal("100.00")
    assert summary.percentage_change == Decimal("50.00")
    assert summary.completed_count == 2

    spending = payment_service.earnings_summary("client-1", as_client=True)
    assert spending.total == Decimal("500.00")
    assert spending.as_client is True


def test_earnings_ignore_agreed_amounts(payment_service, active_contract):
    summary = payment_service.earnings_summary("freelancer-1")

    assert summary.total == Decimal("0.00")
    assert summary.pending == Decimal("0.00")
    assert summary.percentage_change is None
    assert payment_service.earnings_summary("client-1").total == Decimal("0.00")
