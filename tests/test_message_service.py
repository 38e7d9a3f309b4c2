import pytest

from app.core.errors import NotFoundError, UnauthorizedError, ValidationError
from app.services.marketplace import BidService, ContractService, MessageService


@pytest.fixture
def message_service(session, clock):
    return MessageService(session, now=clock)


@pytest.fixture
def contract(session, clock, make_project):
    project = make_project()
    bids = BidService(session, now=clock)
    bid = bids.submit_bid(project.id, "freelancer-1", "900.00", 10, "Ready to start")
    bids.accept_bid(bid.id, "client-1")
    return ContractService(session, now=clock).get_contract_for_project(project.id)


def test_message_goes_to_other_party(message_service, contract, clock):
    sent = message_service.send_message(contract.id, "client-1", "  Kickoff call tomorrow?  ", subject="Kickoff")

    assert sent.receiver_id == "freelancer-1"
    assert sent.content == "Kickoff call tomorrow?"
    assert sent.is_read is False
    assert sent.created_at == clock()

    reply = message_service.send_message(contract.id, "freelancer-1", "Works for me")
    assert reply.receiver_id == "client-1"
    assert reply.subject is None


def test_outsiders_cannot_message_or_read(message_service, contract):
    message_service.send_message(contract.id, "client-1", "Private")

    with pytest.raises(UnauthorizedError):
        message_service.send_message(contract.id, "freelancer-2", "Let me in")
    with pytest.raises(UnauthorizedError):
        message_service.list_conversation(contract.id, "freelancer-2")
    with pytest.raises(NotFoundError):
        message_service.send_message(9999, "client-1", "Hello")


@pytest.mark.parametrize("content,subject", [("   ", None), ("x" * 5001, None), ("Hi", "s" * 201)])
def test_message_validation(message_service, contract, content, subject):
    with pytest.raises(ValidationError):
        message_service.send_message(contract.id, "client-1", content, subject=subject)


def test_conversation_is_oldest_first(message_service, contract, clock):
    message_service.send_message(contract.id, "client-1", "First")
    clock.advance(minutes=5)
    message_service.send_message(contract.id, "freelancer-1", "Second")

    conversation = message_service.list_conversation(contract.id, "freelancer-1")

    assert [m.content for m in conversation] == ["First", "Second"]
    assert [m.content for m in message_service.list_inbox("freelancer-1")] == ["First"]


def test_mark_as_read_by_receiver_only(message_service, contract, clock):
    message = message_service.send_message(contract.id, "client-1", "Please review the draft")
    assert message_service.unread_count("freelancer-1") == 1

    with pytest.raises(UnauthorizedError):
        message_service.mark_as_read(message.id, "client-1")

    clock.advance(minutes=3)
    read = message_service.mark_as_read(message.id, "freelancer-1")
    assert read.is_read is True
    assert read.read_at == clock()

    clock.advance(minutes=3)
    assert message_service.mark_as_read(message.id, "freelancer-1").read_at == read.read_at
    assert message_service.unread_count("freelancer-1") == 0
    with pytest.raises(NotFoundError):
        message_service.mark_as_read(9999, "freelancer-1")
