# app/routers/contract_router.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.db.models import ContractStatus
from app.routers.deps import (
    get_actor,
    get_contract_service,
    get_payment_service,
    require_client,
    require_party,
)
from app.schemas.common import ActionResponse
from app.schemas.marketplace import ContractCreateRequest, ContractResponse, EarningsResponse
from app.services.marketplace import Actor, ContractService, PaymentService, Role

router = APIRouter(prefix="/api/contracts", tags=["Contracts"])


@router.post("", response_model=ContractResponse, status_code=status.HTTP_201_CREATED)
async def create_contract(
    payload: ContractCreateRequest,
    actor: Actor = Depends(require_client),
    contract_service: ContractService = Depends(get_contract_service),
):
    contract = contract_service.create_contract(
        project_id=payload.project_id,
        freelancer_id=payload.freelancer_id,
        amount=payload.amount,
        start_date=payload.start_date,
        end_date=payload.end_date,
        terms=payload.terms,
        acting_client_id=actor.user_id,
    )
    return ContractResponse.model_validate(contract)


@router.get("", response_model=List[ContractResponse])
async def list_my_contracts(
    contract_status: Optional[ContractStatus] = Query(None, alias="status"),
    actor: Actor = Depends(get_actor),
    contract_service: ContractService = Depends(get_contract_service),
):
    """Contracts where the acting user is the client or the freelancer"""
    contracts = contract_service.list_contracts_for_user(actor.user_id, contract_status)
    return [ContractResponse.model_validate(c) for c in contracts]


@router.get("/earnings", response_model=EarningsResponse)
async def get_earnings(
    actor: Actor = Depends(require_party),
    payment_service: PaymentService = Depends(get_payment_service),
):
    """Completed payments received by a freelancer, or paid out by a client"""
    summary = payment_service.earnings_summary(actor.user_id, as_client=actor.role == Role.CLIENT)
    return EarningsResponse.model_validate(summary)


@router.get("/{contract_id}", response_model=ContractResponse)
async def get_contract(
    contract_id: int,
    actor: Actor = Depends(get_actor),
    contract_service: ContractService = Depends(get_contract_service),
):
    return ContractResponse.model_validate(
        contract_service.get_contract_for_party(contract_id, actor.user_id)
    )


@router.post("/{contract_id}/complete", response_model=ActionResponse)
async def complete_contract(
    contract_id: int,
    actor: Actor = Depends(require_party),
    contract_service: ContractService = Depends(get_contract_service),
):
    contract_service.complete_contract(contract_id, actor.user_id)
    return ActionResponse(success=True, message="Contract marked as completed")


@router.post("/{contract_id}/cancel", response_model=ActionResponse)
async def cancel_contract(
    contract_id: int,
    actor: Actor = Depends(require_party),
    contract_service: ContractService = Depends(get_contract_service),
):
    contract_service.cancel_contract(contract_id, actor.user_id)
    return ActionResponse(success=True, message="Contract cancelled")


@router.post("/{contract_id}/dispute", response_model=ActionResponse)
async def dispute_contract(
    contract_id: int,
    actor: Actor = Depends(require_party),
    contract_service: ContractService = Depends(get_contract_service),
):
    contract_service.dispute_contract(contract_id, actor.user_id)
    return ActionResponse(success=True, message="Contract marked as disputed")
