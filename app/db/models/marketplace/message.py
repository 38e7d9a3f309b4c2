# app/db/models/marketplace/message.py
from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime


class Message(SQLModel, table=True):
    """Message between the two parties of a contract"""
    __tablename__ = "messages"

    id: Optional[int] = Field(default=None, primary_key=True)
    contract_id: int = Field(foreign_key="contracts.id", index=True)
    sender_id: str = Field(max_length=100)
    receiver_id: str = Field(max_length=100, index=True)
    subject: Optional[str] = Field(default=None, max_length=200)
    content: str
    is_read: bool = Field(default=False)
    read_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
