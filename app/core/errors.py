# app/core/errors.py
"""
Error taxonomy raised by the marketplace services.

Every error is local and recoverable: routers translate them into the
standard ``{"success": false, "message": ..., "data": {"error": code}}``
response through the handler registered in ``app.main``.
"""


class MarketplaceError(Exception):
    """Base class for domain errors"""
    code = "MARKETPLACE_ERROR"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(MarketplaceError):
    """Referenced entity is absent"""
    code = "NOT_FOUND"
    status_code = 404


class InvalidStateError(MarketplaceError):
    """Entity is not in a state that allows the operation"""
    code = "INVALID_STATE"
    status_code = 409


class StaleStateError(InvalidStateError):
    """A concurrent writer changed the entity between read and update"""
    code = "STALE_STATE"


class UnauthorizedError(MarketplaceError):
    """Acting user is not the party the operation requires"""
    code = "UNAUTHORIZED"
    status_code = 403


class DuplicateBidError(MarketplaceError):
    code = "DUPLICATE_BID"
    status_code = 409


class DuplicateContractError(MarketplaceError):
    code = "DUPLICATE_CONTRACT"
    status_code = 409


class DuplicateReviewError(MarketplaceError):
    code = "DUPLICATE_REVIEW"
    status_code = 409


class DuplicatePortfolioError(MarketplaceError):
    code = "DUPLICATE_PORTFOLIO"
    status_code = 409


class ValidationError(MarketplaceError):
    """Input outside the declared numeric or length ranges"""
    code = "VALIDATION_ERROR"
    status_code = 422
