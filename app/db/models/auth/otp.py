# app/db/models/auth/otp.py
from sqlmodel import SQLModel, Field
from datetime import datetime
from typing import Optional


class OtpRecord(SQLModel, table=True):
    """One live email verification code per address"""
    __tablename__ = "otp_records"
    id: Optional[int] = Field(default=None, primary_key=True)
    # Normalized (trimmed, lower-cased); unique so concurrent generations cannot both persist
    email: str = Field(max_length=256, unique=True, index=True)
    otp: str = Field(max_length=6, description="6-digit numeric code")
    expires_at: datetime = Field(index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
