# app/services/marketplace/message_service.py
import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.core.errors import NotFoundError, UnauthorizedError, ValidationError
from app.db.models import Contract, Message
from app.services.marketplace.validation import validate_text

logger = logging.getLogger(__name__)

CONTENT_MAX_LENGTH = 5000
SUBJECT_MAX_LENGTH = 200


class MessageService:
    """Messages between the client and the freelancer of a contract"""

    def __init__(self, session: Session, now: Optional[Callable[[], datetime]] = None):
        self.session = session
        self._now = now or datetime.utcnow

    def send_message(
        self,
        contract_id: int,
        sender_id: str,
        content: str,
        subject: Optional[str] = None,
    ) -> Message:
        """Send to the other party of the contract; only its parties may write"""
        content = validate_text(content, "content", max_length=CONTENT_MAX_LENGTH)
        subject = (subject or "").strip() or None
        if subject is not None and len(subject) > SUBJECT_MAX_LENGTH:
            raise ValidationError(f"subject must be at most {SUBJECT_MAX_LENGTH} characters")

        contract = self._get_contract_for_party(contract_id, sender_id)
        receiver_id = contract.freelancer_id if sender_id == contract.client_id else contract.client_id

        message = Message(
            contract_id=contract_id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            subject=subject,
            content=content,
            is_read=False,
            created_at=self._now(),
        )
        try:
            self.session.add(message)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error sending message on contract {contract_id}: {e}")
            raise
        self.session.refresh(message)
        logger.info(f"Message {message.id} sent on contract {contract_id} by {sender_id}")
        return message

    def list_conversation(self, contract_id: int, user_id: str) -> List[Message]:
        """Messages on a contract, oldest first"""
        self._get_contract_for_party(contract_id, user_id)
        statement = (
            select(Message)
            .where(Message.contract_id == contract_id)
            .order_by(Message.created_at, Message.id)
        )
        return list(self.session.exec(statement).all())

    def list_inbox(self, user_id: str) -> List[Message]:
        statement = (
            select(Message)
            .where(Message.receiver_id == user_id)
            .order_by(Message.created_at.desc(), Message.id.desc())
        )
        return list(self.session.exec(statement).all())

    def unread_count(self, user_id: str) -> int:
        return self.session.exec(
            select(func.count(Message.id)).where(
                Message.receiver_id == user_id,
                Message.is_read == False,  # noqa: E712
            )
        ).one()

    def mark_as_read(self, message_id: int, user_id: str) -> Message:
        message = self.session.get(Message, message_id)
        if message is None:
            raise NotFoundError("Message not found")
        if message.receiver_id != user_id:
            raise UnauthorizedError("Only the receiver can mark a message as read")
        if message.is_read:
            return message

        message.is_read = True
        message.read_at = self._now()
        try:
            self.session.add(message)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error marking message {message_id} as read: {e}")
            raise
        self.session.refresh(message)
        return message

    def _get_contract_for_party(self, contract_id: int, user_id: str) -> Contract:
        contract = self.session.get(Contract, contract_id)
        if contract is None:
            raise NotFoundError("Contract not found")
        if user_id not in (contract.client_id, contract.freelancer_id):
            raise UnauthorizedError("You are not a party to this contract")
        return contract
