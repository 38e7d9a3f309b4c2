import pytest

from app.core.errors import (
    DuplicateReviewError,
    InvalidStateError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from app.services.marketplace import BidService, ContractService, ReviewService


@pytest.fixture
def review_service(session, clock):
    return ReviewService(session, now=clock)


@pytest.fixture
def contract(session, clock, make_project):
    project = make_project()
    bids = BidService(session, now=clock)
    bid = bids.submit_bid(project.id, "freelancer-1", "900.00", 10, "Ready to start")
    bids.accept_bid(bid.id, "client-1")
    return ContractService(session, now=clock).get_contract_for_project(project.id)


@pytest.fixture
def completed_contract(session, clock, contract):
    ContractService(session, now=clock).complete_contract(contract.id, "client-1")
    session.refresh(contract)
    return contract


def test_each_party_reviews_once(review_service, completed_contract):
    by_client = review_service.create_review(completed_contract.id, "client-1", 5, "Great work")
    by_freelancer = review_service.create_review(completed_contract.id, "freelancer-1", 4)

    assert by_client.reviewee_id == "freelancer-1"
    assert by_freelancer.reviewee_id == "client-1"
    assert by_client.comment == "Great work"

    with pytest.raises(DuplicateReviewError):
        review_service.create_review(completed_contract.id, "client-1", 3)


def test_review_requires_completed_contract(review_service, contract):
    with pytest.raises(InvalidStateError):
        review_service.create_review(contract.id, "client-1", 5)


def test_review_by_stranger_is_unauthorized(review_service, completed_contract):
    with pytest.raises(UnauthorizedError):
        review_service.create_review(completed_contract.id, "intruder", 5)


def test_review_missing_contract(review_service):
    with pytest.raises(NotFoundError):
        review_service.create_review(999, "client-1", 5)


@pytest.mark.parametrize("rating", [0, 6, -1, True, "5"])
def test_rating_out_of_range(review_service, completed_contract, rating):
    with pytest.raises(ValidationError):
        review_service.create_review(completed_contract.id, "client-1", rating)


def test_reviews_for_user_and_average(review_service, completed_contract):
    assert review_service.average_rating("freelancer-1") is None

    review_service.create_review(completed_contract.id, "client-1", 4)

    reviews = review_service.list_reviews_for_user("freelancer-1")
    assert [r.rating for r in reviews] == [4]
    assert review_service.average_rating("freelancer-1") == 4.0
    assert len(review_service.list_reviews_for_contract(completed_contract.id)) == 1
    assert review_service.get_review(completed_contract.id, "freelancer-1") is None
