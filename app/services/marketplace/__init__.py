# Bid & contract lifecycle services
from .project_service import ProjectService
from .bid_service import BidService
from .contract_service import ContractService
from .payment_service import EarningsSummary, PaymentService
from .review_service import ReviewService
from .message_service import MessageService
from .portfolio_service import PortfolioService
from .permissions import Actor, Role, require_role

__all__ = [
    "ProjectService",
    "BidService",
    "ContractService",
    "EarningsSummary",
    "PaymentService",
    "ReviewService",
    "MessageService",
    "PortfolioService",
    "Actor",
    "Role",
    "require_role",
]
