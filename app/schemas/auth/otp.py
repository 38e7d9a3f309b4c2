# app/schemas/auth/otp.py
from typing import Optional, Dict, Any
from pydantic import BaseModel, EmailStr, Field


class SendOTPRequest(BaseModel):
    """Request a verification code for an email address"""
    email: EmailStr = Field(..., description="Address the code is sent to")
    name: Optional[str] = Field(None, max_length=100, description="Recipient display name")


class SendOTPResponse(BaseModel):
    success: bool
    message: str
    data: Optional[Dict[str, Any]] = None


class VerifyOTPRequest(BaseModel):
    email: EmailStr
    code: str = Field(..., min_length=1, max_length=12, description="6-digit code from the email")


class VerifyOTPResponse(BaseModel):
    success: bool
    message: str
    data: Optional[Dict[str, Any]] = None
