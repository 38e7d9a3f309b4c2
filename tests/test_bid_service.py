from decimal import Decimal

import pytest
from sqlmodel import Session, select

from app.core.errors import (
    DuplicateBidError,
    DuplicateContractError,
    InvalidStateError,
    NotFoundError,
    StaleStateError,
    UnauthorizedError,
    ValidationError,
)
from app.db.models import Bid, BidStatus, Contract, ContractStatus, Project, ProjectStatus
from app.services.marketplace import BidService
from app.services.marketplace.transitions import guarded_update


@pytest.fixture
def bid_service(session, clock):
    return BidService(session, now=clock, auto_reject_competing_bids=False)


def submit(bid_service, project, freelancer_id="freelancer-1", amount="900.00", days=10):
    return bid_service.submit_bid(
        project_id=project.id,
        freelancer_id=freelancer_id,
        proposed_amount=amount,
        estimated_duration_days=days,
        cover_letter="I have built many of these.",
    )


def test_submit_bid_on_open_project(bid_service, make_project, clock):
    project = make_project()
    bid = submit(bid_service, project)

    assert bid.id is not None
    assert bid.status == BidStatus.PENDING
    assert bid.proposed_amount == Decimal("900.00")
    assert bid.created_at == clock()


def test_accept_bid_creates_contract_and_starts_project(bid_service, make_project, session, clock):
    project = make_project(budget="1000.00")
    bid = submit(bid_service, project)

    accepted = bid_service.accept_bid(bid.id, "client-1")

    assert accepted.status == BidStatus.ACCEPTED
    session.refresh(project)
    assert project.status == ProjectStatus.IN_PROGRESS
    contracts = session.exec(select(Contract).where(Contract.project_id == project.id)).all()
    assert len(contracts) == 1
    contract = contracts[0]
    assert contract.status == ContractStatus.ACTIVE
    assert contract.agreed_amount == Decimal("900.00")
    assert contract.freelancer_id == "freelancer-1"
    assert contract.client_id == "client-1"
    assert contract.bid_id == bid.id
    assert (contract.end_date - contract.start_date).days == 10


def test_accept_replay_returns_accepted_bid(bid_service, make_project, session):
    project = make_project()
    bid = submit(bid_service, project)
    bid_service.accept_bid(bid.id, "client-1")

    again = bid_service.accept_bid(bid.id, "client-1")

    assert again.status == BidStatus.ACCEPTED
    assert len(session.exec(select(Contract)).all()) == 1


def test_second_bid_cannot_be_accepted(bid_service, make_project):
    project = make_project()
    first = submit(bid_service, project, "freelancer-1")
    second = submit(bid_service, project, "freelancer-2")
    bid_service.accept_bid(first.id, "client-1")

    with pytest.raises(InvalidStateError):
        bid_service.accept_bid(second.id, "client-1")


def test_competing_bids_left_pending_by_default(bid_service, make_project, session):
    project = make_project()
    first = submit(bid_service, project, "freelancer-1")
    second = submit(bid_service, project, "freelancer-2")
    bid_service.accept_bid(first.id, "client-1")

    assert session.get(Bid, second.id).status == BidStatus.PENDING


def test_competing_bids_auto_rejected_when_enabled(session, clock, make_project):
    service = BidService(session, now=clock, auto_reject_competing_bids=True)
    project = make_project()
    first = submit(service, project, "freelancer-1")
    second = submit(service, project, "freelancer-2")
    service.accept_bid(first.id, "client-1")

    assert session.get(Bid, second.id).status == BidStatus.REJECTED


def test_accept_requires_project_owner(bid_service, make_project, session):
    project = make_project()
    bid = submit(bid_service, project)

    with pytest.raises(UnauthorizedError):
        bid_service.accept_bid(bid.id, "someone-else")

    assert session.get(Bid, bid.id).status == BidStatus.PENDING
    assert session.get(Project, project.id).status == ProjectStatus.OPEN
    assert session.exec(select(Contract)).all() == []


def test_accept_when_contract_already_exists(bid_service, make_project, session, clock):
    project = make_project()
    bid = submit(bid_service, project)
    session.add(Contract(
        project_id=project.id,
        client_id="client-1",
        freelancer_id="freelancer-9",
        agreed_amount=Decimal("500.00"),
        start_date=clock(),
    ))
    session.commit()

    with pytest.raises(DuplicateContractError):
        bid_service.accept_bid(bid.id, "client-1")


def test_duplicate_bid_rejected(bid_service, make_project):
    project = make_project()
    submit(bid_service, project)

    with pytest.raises(DuplicateBidError):
        submit(bid_service, project)


def test_rebid_allowed_after_withdraw(bid_service, make_project):
    project = make_project()
    bid = submit(bid_service, project)
    assert bid_service.withdraw_bid(bid.id, "freelancer-1") is True

    again = submit(bid_service, project, amount="850.00")

    assert again.id != bid.id
    assert again.status == BidStatus.PENDING


def test_bid_on_closed_project_is_invalid(bid_service, make_project):
    project = make_project(status=ProjectStatus.CLOSED)

    with pytest.raises(InvalidStateError):
        submit(bid_service, project)


def test_bid_on_own_project_is_unauthorized(bid_service, make_project):
    project = make_project(client_id="client-1")

    with pytest.raises(UnauthorizedError):
        submit(bid_service, project, freelancer_id="client-1")


def test_bid_on_missing_or_deleted_project(bid_service, make_project):
    deleted = make_project(is_deleted=True)

    with pytest.raises(NotFoundError):
        submit(bid_service, deleted)
    with pytest.raises(NotFoundError):
        bid_service.submit_bid(9999, "freelancer-1", "10.00", 1, "hello")


@pytest.mark.parametrize("amount,days", [
    ("0", 10),
    ("-5.00", 10),
    ("10.001", 10),
    ("abc", 10),
    ("100.00", 0),
    ("100.00", 366),
])
def test_bid_input_validation(bid_service, make_project, amount, days):
    project = make_project()

    with pytest.raises(ValidationError):
        submit(bid_service, project, amount=amount, days=days)


def test_reject_bid(bid_service, make_project):
    project = make_project()
    bid = submit(bid_service, project)

    rejected = bid_service.reject_bid(bid.id, "client-1")

    assert rejected.status == BidStatus.REJECTED
    assert bid_service.reject_bid(bid.id, "client-1").status == BidStatus.REJECTED
    with pytest.raises(InvalidStateError):
        bid_service.accept_bid(bid.id, "client-1")


def test_withdraw_requires_bid_owner(bid_service, make_project):
    project = make_project()
    bid = submit(bid_service, project)

    with pytest.raises(UnauthorizedError):
        bid_service.withdraw_bid(bid.id, "freelancer-2")


def test_withdraw_accepted_bid_is_invalid(bid_service, make_project):
    project = make_project()
    bid = submit(bid_service, project)
    bid_service.accept_bid(bid.id, "client-1")

    with pytest.raises(InvalidStateError):
        bid_service.withdraw_bid(bid.id, "freelancer-1")


def test_missing_bid(bid_service):
    with pytest.raises(NotFoundError):
        bid_service.get_bid(42)


def test_guarded_update_detects_concurrent_change(bid_service, make_project, session):
    project = make_project()
    bid = submit(bid_service, project)
    bid_service.reject_bid(bid.id, "client-1")

    with pytest.raises(StaleStateError):
        guarded_update(session, Bid, bid.id, [BidStatus.PENDING], {"status": BidStatus.ACCEPTED})
    session.rollback()


def test_stale_accept_leaves_no_contract(engine, make_project, clock):
    with Session(engine) as first, Session(engine) as second:
        project = make_project()
        bid = submit(BidService(first, now=clock), project)
        project_id, bid_id = project.id, bid.id
        accepting = BidService(first, now=clock)
        rejecting = BidService(second, now=clock)

        # Both services read the pending bid before either writes
        accepting.get_bid(bid_id)
        rejecting.get_bid(bid_id)
        rejecting.reject_bid(bid_id, "client-1")

        with pytest.raises((StaleStateError, InvalidStateError)):
            accepting.accept_bid(bid_id, "client-1")

    with Session(engine) as check:
        assert check.exec(select(Contract)).all() == []
        assert check.get(Project, project_id).status == ProjectStatus.OPEN
        assert check.get(Bid, bid_id).status == BidStatus.REJECTED


def test_list_bids(bid_service, make_project):
    project = make_project()
    submit(bid_service, project, "freelancer-1")
    submit(bid_service, project, "freelancer-2")

    assert len(bid_service.list_bids_for_project(project.id)) == 2
    assert [b.freelancer_id for b in bid_service.list_bids_for_freelancer("freelancer-2")] == ["freelancer-2"]


def test_project_owner_sees_every_bid(bid_service, make_project):
    project = make_project()
    submit(bid_service, project, "freelancer-1")
    submit(bid_service, project, "freelancer-2")

    visible = bid_service.list_bids_visible_to(project.id, "client-1")

    assert sorted(b.freelancer_id for b in visible) == ["freelancer-1", "freelancer-2"]


def test_bidder_sees_only_own_bids(bid_service, make_project):
    project = make_project()
    submit(bid_service, project, "freelancer-1")
    submit(bid_service, project, "freelancer-2")

    visible = bid_service.list_bids_visible_to(project.id, "freelancer-2")

    assert [b.freelancer_id for b in visible] == ["freelancer-2"]
    assert bid_service.list_bids_visible_to(project.id, "client-2") == []
    with pytest.raises(NotFoundError):
        bid_service.list_bids_visible_to(9999, "client-1")
