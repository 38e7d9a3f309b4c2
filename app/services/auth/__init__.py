from .otp_service import OTPService, OtpCheckResult, normalize_email

__all__ = ["OTPService", "OtpCheckResult", "normalize_email"]
