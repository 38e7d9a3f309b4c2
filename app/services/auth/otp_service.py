# app/services/auth/otp_service.py
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Optional
import logging
import secrets

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from app.core.config import settings
from app.core.errors import StaleStateError, ValidationError
from app.db.models import OtpRecord

logger = logging.getLogger(__name__)

OTP_MIN = 100000
OTP_MAX = 999999


class OtpCheckResult(str, Enum):
    VALID = "valid"
    MISMATCH = "mismatch"
    EXPIRED = "expired"
    MISSING = "missing"


def normalize_email(email: Optional[str]) -> str:
    """Case-insensitive key used to store and look up codes"""
    return (email or "").strip().lower()


class OTPService:
    """
    Issues and validates one-time email verification codes.

    Codes live in the ``otp_records`` table, one row per email. Expiry is
    enforced lazily when a code is checked. Delivery is not handled here:
    the caller hands the returned code to a notification sender.

    Args:
        session: database session used for every operation
        now: clock returning naive UTC datetimes (defaults to ``datetime.utcnow``)
        rng: object with ``randint(a, b)``; defaults to a cryptographic RNG
        expiry_minutes: code lifetime, defaults to ``settings.OTP_EXPIRY_MINUTES``
    """

    def __init__(
        self,
        session: Session,
        now: Optional[Callable[[], datetime]] = None,
        rng=None,
        expiry_minutes: Optional[int] = None,
    ):
        self.session = session
        self._now = now or datetime.utcnow
        self._rng = rng or secrets.SystemRandom()
        minutes = settings.OTP_EXPIRY_MINUTES if expiry_minutes is None else expiry_minutes
        self.expiry = timedelta(minutes=minutes)

    def _new_code(self) -> str:
        return str(self._rng.randint(OTP_MIN, OTP_MAX))

    def generate_otp(self, email: str) -> str:
        """Replace any code for ``email`` with a fresh one and return it"""
        key = normalize_email(email)
        if not key:
            raise ValidationError("Email is required")

        attempts = max(1, settings.OTP_GENERATION_RETRIES)
        for attempt in range(1, attempts + 1):
            code = self._new_code()
            now = self._now()
            try:
                self.session.exec(delete(OtpRecord).where(OtpRecord.email == key))
                self.session.add(
                    OtpRecord(email=key, otp=code, expires_at=now + self.expiry, created_at=now)
                )
                self.session.commit()
            except IntegrityError:
                # Another generation for the same email committed first
                self.session.rollback()
                logger.warning(f"Concurrent OTP generation for {key} (attempt {attempt}/{attempts})")
                continue
            except SQLAlchemyError as e:
                self.session.rollback()
                logger.error(f"Error storing OTP for {key}: {e}")
                raise

            logger.info(f"OTP generated for {key}")
            if settings.OTP_DEBUG_LOG:
                logger.warning("OTP_DEBUG_LOG: OTP for %s is %s (disable in production)", key, code)
            return code

        raise StaleStateError(f"Could not store a new OTP for {key}; please retry")

    def check_otp(self, email: str, code: str) -> OtpCheckResult:
        """
        Validate ``code`` for ``email`` and report why it failed, if it did.

        A matching live code is consumed. An expired code is deleted. A
        mismatching code leaves the record live.
        """
        key = normalize_email(email)
        now = self._now()
        try:
            record = self.session.exec(
                select(OtpRecord)
                .where(OtpRecord.email == key)
                .order_by(OtpRecord.created_at.desc())
            ).first()

            if record is None:
                return OtpCheckResult.MISSING

            if record.expires_at < now:
                self.session.exec(delete(OtpRecord).where(OtpRecord.id == record.id))
                self.session.commit()
                logger.info(f"Expired OTP removed for {key}")
                return OtpCheckResult.EXPIRED

            if not isinstance(code, str) or not secrets.compare_digest(
                record.otp.encode(), code.encode()
            ):
                return OtpCheckResult.MISMATCH

            # Conditional delete: only one concurrent verifier can remove the row
            result = self.session.exec(
                delete(OtpRecord).where(
                    OtpRecord.id == record.id,
                    OtpRecord.otp == code,
                    OtpRecord.expires_at >= now,
                )
            )
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error verifying OTP for {key}: {e}")
            raise

        if result.rowcount != 1:
            logger.info(f"OTP for {key} was consumed by a concurrent verification")
            return OtpCheckResult.MISSING
        logger.info(f"OTP verified for {key}")
        return OtpCheckResult.VALID

    def verify_otp(self, email: str, code: str) -> bool:
        """True exactly once per generated code, while it is unexpired"""
        return self.check_otp(email, code) is OtpCheckResult.VALID

    def purge_expired(self) -> int:
        """Delete every expired code; returns the number removed"""
        try:
            result = self.session.exec(
                delete(OtpRecord).where(OtpRecord.expires_at < self._now())
            )
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error purging expired OTPs: {e}")
            raise
        logger.info(f"Purged {result.rowcount} expired OTP record(s)")
        return result.rowcount
