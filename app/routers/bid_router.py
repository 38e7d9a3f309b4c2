# app/routers/bid_router.py
from typing import List

from fastapi import APIRouter, Depends, status

from app.routers.deps import (
    get_actor,
    get_bid_service,
    get_contract_service,
    require_client,
    require_freelancer,
)
from app.schemas.common import ActionResponse
from app.schemas.marketplace import (
    BidAcceptResponse,
    BidCreateRequest,
    BidResponse,
    ContractResponse,
)
from app.services.marketplace import Actor, BidService, ContractService


router = APIRouter(prefix="/api", tags=["Bids"])


@router.post(
    "/projects/{project_id}/bids",
    response_model=BidResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_bid(
    project_id: int,
    payload: BidCreateRequest,
    actor: Actor = Depends(require_freelancer),
    bid_service: BidService = Depends(get_bid_service),
):
    bid = bid_service.submit_bid(
        project_id=project_id,
        freelancer_id=actor.user_id,
        proposed_amount=payload.proposed_amount,
        estimated_duration_days=payload.estimated_duration_days,
        cover_letter=payload.cover_letter,
    )
    return BidResponse.model_validate(bid)


@router.get("/projects/{project_id}/bids", response_model=List[BidResponse])
async def list_project_bids(
    project_id: int,
    actor: Actor = Depends(get_actor),
    bid_service: BidService = Depends(get_bid_service),
):
    """Every bid for the project owner; a freelancer only sees their own"""
    bids = bid_service.list_bids_visible_to(project_id, actor.user_id)
    return [BidResponse.model_validate(b) for b in bids]


@router.get("/bids/mine", response_model=List[BidResponse])
async def list_my_bids(
    actor: Actor = Depends(require_freelancer),
    bid_service: BidService = Depends(get_bid_service),
):
    return [BidResponse.model_validate(b) for b in bid_service.list_bids_for_freelancer(actor.user_id)]


@router.post("/bids/{bid_id}/accept", response_model=BidAcceptResponse)
async def accept_bid(
    bid_id: int,
    actor: Actor = Depends(require_client),
    bid_service: BidService = Depends(get_bid_service),
    contract_service: ContractService = Depends(get_contract_service),
):
    """Accept a bid: the project goes in progress and its contract is created"""
    bid = bid_service.accept_bid(bid_id, actor.user_id)
    contract = contract_service.get_contract_for_project(bid.project_id)
    return BidAcceptResponse(
        bid=BidResponse.model_validate(bid),
        contract=ContractResponse.model_validate(contract),
    )


@router.post("/bids/{bid_id}/reject", response_model=BidResponse)
async def reject_bid(
    bid_id: int,
    actor: Actor = Depends(require_client),
    bid_service: BidService = Depends(get_bid_service),
):
    return BidResponse.model_validate(bid_service.reject_bid(bid_id, actor.user_id))


@router.post("/bids/{bid_id}/withdraw", response_model=ActionResponse)
async def withdraw_bid(
    bid_id: int,
    actor: Actor = Depends(require_freelancer),
    bid_service: BidService = Depends(get_bid_service),
):
    bid_service.withdraw_bid(bid_id, actor.user_id)
    return ActionResponse(success=True, message="Bid withdrawn successfully")
