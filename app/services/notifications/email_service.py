# app/services/notifications/email_service.py
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Optional

from app.core.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    """
    Sends verification codes over SMTP.

    If SMTP is not configured the service runs in dev mode: the send is
    logged instead and reported as not delivered.
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_ssl: Optional[bool] = None,
    ):
        self.host = host if host is not None else settings.SMTP_HOST
        self.port = port if port is not None else settings.SMTP_PORT
        self.username = username if username is not None else settings.SMTP_USERNAME
        self.password = password if password is not None else settings.SMTP_PASSWORD
        self.use_ssl = use_ssl if use_ssl is not None else settings.SMTP_USE_SSL
        self.sender = settings.EMAIL_SENDER
        self.sender_name = settings.EMAIL_SENDER_NAME
        self.timeout = settings.SMTP_TIMEOUT

        if not self.enabled:
            logger.warning("SMTP not configured; OTP emails will not be delivered (dev mode)")

    @property
    def enabled(self) -> bool:
        return bool(self.host and self.port and self.username and self.password)

    def build_otp_message(self, to_email: str, to_name: str, code: str) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["Subject"] = f"Verify your email - {self.sender_name}"
        message["From"] = formataddr((self.sender_name, self.sender))
        message["To"] = formataddr((to_name or to_email, to_email))

        minutes = settings.OTP_EXPIRY_MINUTES
        text = (
            f"Hi {to_name or 'there'},\n\n"
            f"Your verification code is: {code}\n\n"
            f"It expires in {minutes} minutes. If you did not request this, ignore this email."
        )
        html = (
            f"<p>Hi {to_name or 'there'},</p>"
            f"<p>Your verification code is:</p>"
            f"<p style=\"font-size:28px;letter-spacing:6px;font-weight:bold\">{code}</p>"
            f"<p>It expires in {minutes} minutes. If you did not request this, ignore this email.</p>"
        )
        message.attach(MIMEText(text, "plain"))
        message.attach(MIMEText(html, "html"))
        return message

    def send_otp_email(self, to_email: str, to_name: str, code: str) -> bool:
        """Returns True only if the SMTP server accepted the message"""
        if not self.enabled:
            logger.info(f"Dev mode: OTP email for {to_email} not sent")
            if settings.OTP_DEBUG_LOG:
                logger.warning("OTP_DEBUG_LOG: OTP for %s is %s", to_email, code)
            return False

        message = self.build_otp_message(to_email, to_name, code)
        try:
            # Port 465 is implicit TLS; anything else upgrades with STARTTLS
            if self.use_ssl or self.port == 465:
                with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as server:
                    server.login(self.username, self.password)
                    server.send_message(message)
            else:
                with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                    server.starttls()
                    server.login(self.username, self.password)
                    server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send OTP email to {to_email}: {e}")
            return False

        logger.info(f"OTP email sent successfully to {to_email}")
        return True
