from datetime import timedelta
from decimal import Decimal

import pytest
from sqlmodel import select

from app.core.errors import (
    DuplicateContractError,
    InvalidStateError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from app.db.models import (
    ContractStatus,
    PaymentStatus,
    PaymentTransaction,
    PaymentType,
    Project,
    ProjectStatus,
)
from app.services.marketplace import BidService, ContractService, PaymentService


@pytest.fixture
def contract_service(session, clock):
    return ContractService(session, now=clock)


@pytest.fixture
def active_contract(session, clock, make_project):
    """Contract produced by accepting a 900.00 bid on a 1000.00 project"""
    project = make_project(budget="1000.00")
    bids = BidService(session, now=clock)
    bid = bids.submit_bid(project.id, "freelancer-1", "900.00", 10, "Ready to start")
    bids.accept_bid(bid.id, "client-1")
    return ContractService(session, now=clock).get_contract_for_project(project.id)


def create(contract_service, project, freelancer_id="freelancer-1", amount="750.00",
           acting_client_id="client-1", start=None, end=None, clock=None):
    start = start or clock()
    return contract_service.create_contract(
        project_id=project.id,
        freelancer_id=freelancer_id,
        amount=amount,
        start_date=start,
        end_date=end,
        terms="Two milestones",
        acting_client_id=acting_client_id,
    )


def test_complete_contract_completes_project(contract_service, active_contract, session):
    assert contract_service.complete_contract(active_contract.id, "client-1") is True

    session.refresh(active_contract)
    assert active_contract.status == ContractStatus.COMPLETED
    assert session.get(Project, active_contract.project_id).status == ProjectStatus.COMPLETED


def test_complete_replay_is_success(contract_service, active_contract):
    contract_service.complete_contract(active_contract.id, "freelancer-1")

    assert contract_service.complete_contract(active_contract.id, "client-1") is True


def test_complete_by_stranger_is_unauthorized(contract_service, active_contract):
    with pytest.raises(UnauthorizedError):
        contract_service.complete_contract(active_contract.id, "intruder")


def test_cancelled_contract_cannot_complete(contract_service, active_contract):
    assert contract_service.cancel_contract(active_contract.id, "freelancer-1") is True
    assert contract_service.cancel_contract(active_contract.id, "client-1") is True

    with pytest.raises(InvalidStateError):
        contract_service.complete_contract(active_contract.id, "client-1")


def test_dispute_contract(contract_service, active_contract, session):
    assert contract_service.dispute_contract(active_contract.id, "client-1") is True
    session.refresh(active_contract)
    assert active_contract.status == ContractStatus.DISPUTED

    assert contract_service.dispute_contract(active_contract.id, "freelancer-1") is True
    with pytest.raises(InvalidStateError):
        contract_service.cancel_contract(active_contract.id, "client-1")


def test_missing_contract(contract_service):
    with pytest.raises(NotFoundError):
        contract_service.complete_contract(404, "client-1")


def test_create_contract_directly(contract_service, make_project, clock):
    project = make_project()
    end = clock() + timedelta(days=30)

    contract = create(contract_service, project, end=end, clock=clock)

    assert contract.status == ContractStatus.ACTIVE
    assert contract.agreed_amount == Decimal("750.00")
    assert contract.client_id == "client-1"
    assert contract.bid_id is None
    assert contract.terms == "Two milestones"


def test_create_contract_twice_is_duplicate(contract_service, make_project, clock):
    project = make_project()
    create(contract_service, project, clock=clock)

    with pytest.raises(DuplicateContractError):
        create(contract_service, project, freelancer_id="freelancer-2", clock=clock)


def test_create_contract_after_acceptance_is_duplicate(contract_service, active_contract, session, clock):
    project = session.get(Project, active_contract.project_id)

    with pytest.raises(DuplicateContractError):
        create(contract_service, project, clock=clock)


def test_create_contract_requires_owner(contract_service, make_project, clock):
    project = make_project()

    with pytest.raises(UnauthorizedError):
        create(contract_service, project, acting_client_id="client-2", clock=clock)


def test_create_contract_on_closed_project(contract_service, make_project, clock):
    project = make_project(status=ProjectStatus.CLOSED)

    with pytest.raises(InvalidStateError):
        create(contract_service, project, clock=clock)


def test_create_contract_validation(contract_service, make_project, clock):
    project = make_project()

    with pytest.raises(ValidationError):
        create(contract_service, project, amount="0", clock=clock)
    with pytest.raises(ValidationError):
        create(contract_service, project, end=clock() - timedelta(days=1), clock=clock)
    with pytest.raises(ValidationError):
        create(contract_service, project, freelancer_id="client-1", clock=clock)


def test_get_contract_for_party(contract_service, active_contract):
    assert contract_service.get_contract_for_party(active_contract.id, "freelancer-1").id == active_contract.id

    with pytest.raises(UnauthorizedError):
        contract_service.get_contract_for_party(active_contract.id, "intruder")


def test_list_contracts_for_user(contract_service, active_contract):
    assert [c.id for c in contract_service.list_contracts_for_user("client-1")] == [active_contract.id]
    assert contract_service.list_contracts_for_user("freelancer-1", ContractStatus.COMPLETED) == []
    assert contract_service.list_contracts_for_user("nobody") == []


def test_completion_records_final_payment(contract_service, active_contract, session, clock):
    contract_service.complete_contract(active_contract.id, "client-1")

    payments = session.exec(select(PaymentTransaction)).all()
    assert len(payments) == 1
    assert payments[0].type == PaymentType.FINAL
    assert payments[0].status == PaymentStatus.COMPLETED
    assert payments[0].amount == Decimal("900.00")
    assert payments[0].processed_at == clock()


def test_completion_pays_only_the_balance(contract_service, active_contract, session, clock):
    payments = PaymentService(session, now=clock)
    deposit = payments.record_payment(active_contract.id, "client-1", "250.00", PaymentType.DEPOSIT)
    payments.complete_payment(deposit.id, "client-1")
    open_milestone = payments.record_payment(active_contract.id, "client-1", "100.00")

    contract_service.complete_contract(active_contract.id, "freelancer-1")
    contract_service.complete_contract(active_contract.id, "client-1")

    final = session.exec(
        select(PaymentTransaction).where(PaymentTransaction.type == PaymentType.FINAL)
    ).all()
    assert [p.amount for p in final] == [Decimal("650.00")]
    session.refresh(open_milestone)
    assert open_milestone.status == PaymentStatus.FAILED
