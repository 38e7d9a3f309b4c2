# app/routers/auth_router.py
from fastapi import APIRouter, Depends, HTTPException, Request
from datetime import datetime
from typing import Optional, Dict, Any
import hashlib
import json
import logging
import uuid

from app.core.config import settings
from app.routers.deps import get_email_service, get_otp_service, require_admin
from app.schemas.auth import (
    SendOTPRequest,
    SendOTPResponse,
    VerifyOTPRequest,
    VerifyOTPResponse,
)
from app.schemas.common import ActionResponse
from app.services.auth.otp_service import OTPService, OtpCheckResult
from app.services.marketplace import Actor
from app.services.notifications.email_service import EmailService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


def hash_email(email: str) -> str:
    """One-way hash so audit lines never carry the raw address"""
    return hashlib.sha256(email.strip().lower().encode()).hexdigest()


def audit_log(action: str, email: str, request_id: Optional[str] = None,
              ip_address: Optional[str] = None, success: bool = True,
              details: Optional[Dict[str, Any]] = None):
    audit_entry = {
        'timestamp': datetime.utcnow().isoformat(),
        'action': action,
        'email_hash': hash_email(email),
        'request_id': request_id,
        'ip_address': ip_address,
        'success': success,
        'details': details or {}
    }
    logger.info(f"AUDIT: {json.dumps(audit_entry)}")


def get_client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get('x-forwarded-for')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.client.host if request.client else None


@router.post("/send-otp", response_model=SendOTPResponse)
async def send_otp(
    payload: SendOTPRequest,
    request: Request,
    otp_service: OTPService = Depends(get_otp_service),
    email_service: EmailService = Depends(get_email_service),
):
    """
    Generate a verification code for the email and deliver it.

    Any earlier code for the same address stops working.
    """
    request_id = str(uuid.uuid4())
    ip_address = get_client_ip(request)
    email = str(payload.email)

    code = otp_service.generate_otp(email)
    delivered = email_service.send_otp_email(email, payload.name or email, code)

    if not delivered and email_service.enabled:
        audit_log('otp_send_failed', email, request_id=request_id,
                  ip_address=ip_address, success=False)
        raise HTTPException(status_code=502, detail="Failed to send OTP email. Please try again.")

    audit_log('otp_sent', email, request_id=request_id, ip_address=ip_address,
              success=True, details={'delivered': delivered})
    return SendOTPResponse(
        success=True,
        message="OTP sent successfully. Please check your email." if delivered
        else "OTP generated; email delivery is disabled on this server.",
        data={
            "email": email,
            "request_id": request_id,
            "otp_expires_in": settings.OTP_EXPIRY_MINUTES * 60,
        }
    )


@router.post("/verify-otp", response_model=VerifyOTPResponse)
async def verify_otp(
    payload: VerifyOTPRequest,
    request: Request,
    otp_service: OTPService = Depends(get_otp_service),
):
    """
    Verify a code. Wrong, expired and never-requested codes get the same answer.
    """
    request_id = str(uuid.uuid4())
    email = str(payload.email)

    result = otp_service.check_otp(email, payload.code.strip())
    verified = result is OtpCheckResult.VALID
    audit_log('otp_verify', email, request_id=request_id, ip_address=get_client_ip(request),
              success=verified, details={'result': result.value})

    if not verified:
        return VerifyOTPResponse(
            success=False,
            message="Invalid or expired OTP",
            data={"error": "INVALID_OTP"}
        )
    return VerifyOTPResponse(
        success=True,
        message="Email verified successfully",
        data={"email": email, "verified": True}
    )


@router.post("/admin/purge-expired-otps", response_model=ActionResponse)
async def purge_expired_otps(
    actor: Actor = Depends(require_admin),
    otp_service: OTPService = Depends(get_otp_service),
):
    removed = otp_service.purge_expired()
    logger.info(f"Expired OTP purge requested by admin {actor.user_id}: {removed} removed")
    return ActionResponse(success=True, message=f"Removed {removed} expired OTP(s)",
                          data={"removed": removed})
