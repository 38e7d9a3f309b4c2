# app/routers/payment_router.py
from typing import List

from fastapi import APIRouter, Depends, status

from app.routers.deps import get_actor, get_payment_service, require_client
from app.schemas.marketplace import PaymentCreateRequest, PaymentResponse
from app.services.marketplace import Actor, PaymentService

router = APIRouter(prefix="/api", tags=["Payments"])


@router.post(
    "/contracts/{contract_id}/payments",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_payment(
    contract_id: int,
    payload: PaymentCreateRequest,
    actor: Actor = Depends(require_client),
    payment_service: PaymentService = Depends(get_payment_service),
):
    """Record a pending deposit or milestone payment on an active contract"""
    payment = payment_service.record_payment(
        contract_id,
        actor.user_id,
        amount=payload.amount,
        payment_type=payload.type,
        description=payload.description,
        transaction_id=payload.transaction_id,
    )
    return PaymentResponse.model_validate(payment)


@router.get("/contracts/{contract_id}/payments", response_model=List[PaymentResponse])
async def list_contract_payments(
    contract_id: int,
    actor: Actor = Depends(get_actor),
    payment_service: PaymentService = Depends(get_payment_service),
):
    payments = payment_service.list_payments_for_contract(contract_id, actor.user_id)
    return [PaymentResponse.model_validate(p) for p in payments]


@router.post("/payments/{payment_id}/complete", response_model=PaymentResponse)
async def complete_payment(
    payment_id: int,
    actor: Actor = Depends(require_client),
    payment_service: PaymentService = Depends(get_payment_service),
):
    return PaymentResponse.model_validate(payment_service.complete_payment(payment_id, actor.user_id))


@router.post("/payments/{payment_id}/fail", response_model=PaymentResponse)
async def fail_payment(
    payment_id: int,
    actor: Actor = Depends(require_client),
    payment_service: PaymentService = Depends(get_payment_service),
):
    return PaymentResponse.model_validate(payment_service.fail_payment(payment_id, actor.user_id))
