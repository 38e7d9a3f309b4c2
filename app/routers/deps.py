# app/routers/deps.py
from typing import Callable, Optional

from fastapi import Depends, Header, HTTPException, status
from sqlmodel import Session

from app.db.session import get_session
from app.services.auth.otp_service import OTPService
from app.services.marketplace import (
    Actor,
    BidService,
    ContractService,
    MessageService,
    PaymentService,
    PortfolioService,
    ProjectService,
    ReviewService,
    Role,
    require_role,
)
from app.services.notifications.email_service import EmailService


def get_actor(
    x_user_id: Optional[str] = Header(None, description="Acting user identity"),
    x_user_role: Optional[str] = Header(None, description="client, freelancer or admin"),
) -> Actor:
    """Acting identity supplied by the upstream authentication layer"""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    try:
        role = Role((x_user_role or "").strip().lower())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid X-User-Role header",
        )
    return Actor(user_id=x_user_id.strip(), role=role)


def role_required(*roles: Role) -> Callable[..., Actor]:
    """Dependency factory: the acting user must hold one of ``roles``"""
    def dependency(actor: Actor = Depends(get_actor)) -> Actor:
        return require_role(actor, *roles)
    return dependency


require_client = role_required(Role.CLIENT)
require_freelancer = role_required(Role.FREELANCER)
require_party = role_required(Role.CLIENT, Role.FREELANCER)
require_admin = role_required(Role.ADMIN)


def get_otp_service(session: Session = Depends(get_session)) -> OTPService:
    return OTPService(session)


def get_email_service() -> EmailService:
    return EmailService()


def get_project_service(session: Session = Depends(get_session)) -> ProjectService:
    return ProjectService(session)


def get_bid_service(session: Session = Depends(get_session)) -> BidService:
    return BidService(session)


def get_contract_service(session: Session = Depends(get_session)) -> ContractService:
    return ContractService(session)


def get_review_service(session: Session = Depends(get_session)) -> ReviewService:
    return ReviewService(session)


def get_payment_service(session: Session = Depends(get_session)) -> PaymentService:
    return PaymentService(session)


def get_message_service(session: Session = Depends(get_session)) -> MessageService:
    return MessageService(session)


def get_portfolio_service(session: Session = Depends(get_session)) -> PortfolioService:
    return PortfolioService(session)


def get_optional_viewer(
    x_user_id: Optional[str] = Header(None, description="Acting user identity, if signed in"),
) -> Optional[str]:
    """Identity for public pages that behave differently for the owner"""
    return (x_user_id or "").strip() or None
