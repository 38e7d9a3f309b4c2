# app/core/config.py
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings, read from the environment (and .env when present).
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Application ---
    APP_NAME: str = "freelance-marketplace"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # --- Database ---
    DATABASE_URL: str = "sqlite:///./marketplace.db"
    DATABASE_ECHO: bool = False

    # --- OTP ---
    OTP_EXPIRY_MINUTES: int = 10
    OTP_GENERATION_RETRIES: int = 3
    # Logs generated codes; local development only
    OTP_DEBUG_LOG: bool = False

    # --- Bidding ---
    AUTO_REJECT_COMPETING_BIDS: bool = False
    MAX_BID_DURATION_DAYS: int = 365

    # --- Email (SMTP) ---
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_USE_SSL: bool = False
    SMTP_TIMEOUT: int = 15
    EMAIL_SENDER: str = "noreply@freelance-marketplace.local"
    EMAIL_SENDER_NAME: str = "Freelance Marketplace"


settings = Settings()
