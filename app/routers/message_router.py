# app/routers/message_router.py
from typing import List

from fastapi import APIRouter, Depends, status

from app.routers.deps import get_actor, get_message_service
from app.schemas.marketplace import InboxResponse, MessageCreateRequest, MessageResponse
from app.services.marketplace import Actor, MessageService

router = APIRouter(prefix="/api", tags=["Messages"])


@router.post(
    "/contracts/{contract_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_message(
    contract_id: int,
    payload: MessageCreateRequest,
    actor: Actor = Depends(get_actor),
    message_service: MessageService = Depends(get_message_service),
):
    """Message the other party of a contract"""
    message = message_service.send_message(
        contract_id, actor.user_id, content=payload.content, subject=payload.subject
    )
    return MessageResponse.model_validate(message)


@router.get("/contracts/{contract_id}/messages", response_model=List[MessageResponse])
async def list_conversation(
    contract_id: int,
    actor: Actor = Depends(get_actor),
    message_service: MessageService = Depends(get_message_service),
):
    messages = message_service.list_conversation(contract_id, actor.user_id)
    return [MessageResponse.model_validate(m) for m in messages]


@router.get("/messages", response_model=InboxResponse)
async def get_inbox(
    actor: Actor = Depends(get_actor),
    message_service: MessageService = Depends(get_message_service),
):
    return InboxResponse(
        unread_count=message_service.unread_count(actor.user_id),
        messages=[MessageResponse.model_validate(m) for m in message_service.list_inbox(actor.user_id)],
    )


@router.post("/messages/{message_id}/read", response_model=MessageResponse)
async def mark_message_read(
    message_id: int,
    actor: Actor = Depends(get_actor),
    message_service: MessageService = Depends(get_message_service),
):
    return MessageResponse.model_validate(message_service.mark_as_read(message_id, actor.user_id))
