# Marketplace schemas
from .project import (
    ProjectCreateRequest,
    ProjectUpdateRequest,
    ProjectResponse,
    ProjectListResponse,
)
from .bid import BidCreateRequest, BidResponse, BidAcceptResponse
from .contract import ContractCreateRequest, ContractResponse
from .payment import PaymentCreateRequest, PaymentResponse, EarningsResponse
from .review import ReviewCreateRequest, ReviewResponse, UserReviewsResponse
from .message import MessageCreateRequest, MessageResponse, InboxResponse
from .portfolio import (
    PortfolioCreateRequest,
    PortfolioUpdateRequest,
    PortfolioFeatureRequest,
    PortfolioResponse,
    PortfolioListResponse,
    PortfolioCaseRequest,
    PortfolioCaseUpdateRequest,
    PortfolioCaseResponse,
)

__all__ = [
    "ProjectCreateRequest",
    "ProjectUpdateRequest",
    "ProjectResponse",
    "ProjectListResponse",
    "BidCreateRequest",
    "BidResponse",
    "BidAcceptResponse",
    "ContractCreateRequest",
    "ContractResponse",
    "PaymentCreateRequest",
    "PaymentResponse",
    "EarningsResponse",
    "ReviewCreateRequest",
    "ReviewResponse",
    "UserReviewsResponse",
    "MessageCreateRequest",
    "MessageResponse",
    "InboxResponse",
    "PortfolioCreateRequest",
    "PortfolioUpdateRequest",
    "PortfolioFeatureRequest",
    "PortfolioResponse",
    "PortfolioListResponse",
    "PortfolioCaseRequest",
    "PortfolioCaseUpdateRequest",
    "PortfolioCaseResponse",
]
