# Routers package
from . import auth_router
from . import bid_router
from . import contract_router
from . import health_router
from . import message_router
from . import payment_router
from . import portfolio_router
from . import project_router
from . import review_router

__all__ = [
    "auth_router",
    "bid_router",
    "contract_router",
    "health_router",
    "message_router",
    "payment_router",
    "portfolio_router",
    "project_router",
    "review_router",
]
