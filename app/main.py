# app/main.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.errors import MarketplaceError
from app.db.session import init_db
from app.routers import (
    auth_router,
    bid_router,
    contract_router,
    health_router,
    message_router,
    payment_router,
    portfolio_router,
    project_router,
    review_router,
)
from app.schemas.common import ErrorResponse

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    init_db()
    yield
    logger.info("Shutting down")


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    """Render domain errors in the same envelope as successful responses"""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    body = ErrorResponse(message=exc.message, data={"error": exc.code})
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Freelance marketplace: email OTP verification and the bid/contract lifecycle",
        lifespan=lifespan,
    )

    app.add_exception_handler(MarketplaceError, marketplace_error_handler)

    app.include_router(health_router.router)
    app.include_router(auth_router.router)
    app.include_router(project_router.router)
    app.include_router(bid_router.router)
    app.include_router(contract_router.router)
    app.include_router(review_router.router)
    app.include_router(payment_router.router)
    app.include_router(message_router.router)
    app.include_router(portfolio_router.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
