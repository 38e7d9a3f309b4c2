# Table models; importing this package registers every table on SQLModel.metadata
from .auth import OtpRecord
from .marketplace import (
    Project,
    ProjectStatus,
    Bid,
    BidStatus,
    Contract,
    ContractStatus,
    Review,
    PaymentTransaction,
    PaymentStatus,
    PaymentType,
    Message,
    Portfolio,
    PortfolioCase,
)

__all__ = [
    "OtpRecord",
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
