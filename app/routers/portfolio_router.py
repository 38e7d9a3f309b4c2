# app/routers/portfolio_router.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.errors import NotFoundError
from app.routers.deps import (
    get_optional_viewer,
    get_portfolio_service,
    require_admin,
    require_freelancer,
)
from app.schemas.common import ActionResponse
from app.schemas.marketplace import (
    PortfolioCaseRequest,
    PortfolioCaseResponse,
    PortfolioCaseUpdateRequest,
    PortfolioCreateRequest,
    PortfolioFeatureRequest,
    PortfolioListResponse,
    PortfolioResponse,
    PortfolioUpdateRequest,
)
from app.services.marketplace import Actor, PortfolioService

router = APIRouter(prefix="/api/portfolios", tags=["Portfolios"])


@router.post("", response_model=PortfolioResponse, status_code=status.HTTP_201_CREATED)
async def create_portfolio(
    payload: PortfolioCreateRequest,
    actor: Actor = Depends(require_freelancer),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
):
    portfolio = portfolio_service.create_portfolio(actor.user_id, **payload.model_dump())
    return PortfolioResponse.model_validate(portfolio)


@router.get("", response_model=PortfolioListResponse)
async def list_public_portfolios(
    featured: bool = Query(False),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
):
    """Public portfolios, most viewed first"""
    items, total = portfolio_service.list_public_portfolios(featured, page, page_size)
    return PortfolioListResponse(
        items=[PortfolioResponse.model_validate(p) for p in items],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/mine", response_model=PortfolioResponse)
async def get_my_portfolio(
    actor: Actor = Depends(require_freelancer),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
):
    portfolio = portfolio_service.get_freelancer_portfolio(actor.user_id)
    if portfolio is None:
        raise NotFoundError("You have no portfolio yet")
    return PortfolioResponse.model_validate(portfolio)


@router.get("/{portfolio_id}", response_model=PortfolioResponse)
async def view_portfolio(
    portfolio_id: int,
    viewer_id: Optional[str] = Depends(get_optional_viewer),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
):
    return PortfolioResponse.model_validate(portfolio_service.view_portfolio(portfolio_id, viewer_id))


@router.put("/{portfolio_id}", response_model=PortfolioResponse)
async def update_portfolio(
    portfolio_id: int,
    payload: PortfolioUpdateRequest,
    actor: Actor = Depends(require_freelancer),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
):
    portfolio = portfolio_service.update_portfolio(
        portfolio_id, actor.user_id, **payload.model_dump(exclude_unset=True)
    )
    return PortfolioResponse.model_validate(portfolio)


@router.post("/{portfolio_id}/feature", response_model=PortfolioResponse)
async def feature_portfolio(
    portfolio_id: int,
    payload: PortfolioFeatureRequest,
    actor: Actor = Depends(require_admin),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
):
    return PortfolioResponse.model_validate(
        portfolio_service.set_featured(portfolio_id, payload.is_featured)
    )


@router.delete("/{portfolio_id}", response_model=ActionResponse)
async def delete_portfolio(
    portfolio_id: int,
    actor: Actor = Depends(require_freelancer),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
):
    portfolio_service.delete_portfolio(portfolio_id, actor.user_id)
    return ActionResponse(success=True, message="Portfolio deleted successfully")


@router.get("/{portfolio_id}/cases", response_model=List[PortfolioCaseResponse])
async def list_cases(
    portfolio_id: int,
    viewer_id: Optional[str] = Depends(get_optional_viewer),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
):
    cases = portfolio_service.list_cases(portfolio_id, viewer_id)
    return [PortfolioCaseResponse.model_validate(c) for c in cases]


@router.post(
    "/{portfolio_id}/cases",
    response_model=PortfolioCaseResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_case(
    portfolio_id: int,
    payload: PortfolioCaseRequest,
    actor: Actor = Depends(require_freelancer),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
):
    case = portfolio_service.add_case(portfolio_id, actor.user_id, **payload.model_dump())
    return PortfolioCaseResponse.model_validate(case)


@router.get("/cases/{case_id}", response_model=PortfolioCaseResponse)
async def view_case(
    case_id: int,
    viewer_id: Optional[str] = Depends(get_optional_viewer),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
):
    return PortfolioCaseResponse.model_validate(portfolio_service.view_case(case_id, viewer_id))


@router.put("/cases/{case_id}", response_model=PortfolioCaseResponse)
async def update_case(
    case_id: int,
    payload: PortfolioCaseUpdateRequest,
    actor: Actor = Depends(require_freelancer),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
):
    case = portfolio_service.update_case(case_id, actor.user_id, **payload.model_dump(exclude_unset=True))
    return PortfolioCaseResponse.model_validate(case)


@router.delete("/cases/{case_id}", response_model=ActionResponse)
async def delete_case(
    case_id: int,
    actor: Actor = Depends(require_freelancer),
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
):
    portfolio_service.delete_case(case_id, actor.user_id)
    return ActionResponse(success=True, message="Portfolio case deleted successfully")
