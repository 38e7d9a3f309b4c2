# app/schemas/marketplace/message.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class MessageCreateRequest(BaseModel):
    subject: Optional[str] = Field(None, max_length=200)
    content: str = Field(..., min_length=1, max_length=5000)


class MessageResponse(BaseModel):
    id: int
    contract_id: int
    sender_id: str
    receiver_id: str
    subject: Optional[str] = None
    content: str
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class InboxResponse(BaseModel):
    unread_count: int
    messages: List[MessageResponse]
