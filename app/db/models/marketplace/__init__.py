from .project import Project, ProjectStatus
from .bid import Bid, BidStatus
from .contract import Contract, ContractStatus
from .review import Review
from .payment import PaymentTransaction, PaymentStatus, PaymentType
from .message import Message
from .portfolio import Portfolio, PortfolioCase

__all__ = [
    "Project",
    "ProjectStatus",
    "Bid",
    "BidStatus",
    "Contract",
    "ContractStatus",
    "Review",
    "PaymentTransaction",
    "PaymentStatus",
    "PaymentType",
    "Message",
    "Portfolio",
    "PortfolioCase",
]
