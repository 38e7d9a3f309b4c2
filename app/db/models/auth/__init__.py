from .otp import OtpRecord

__all__ = ["OtpRecord"]
