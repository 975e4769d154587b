# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration — all env-driven, zero hardcode.
Club-level settings (club name, reminder days, templates) live in the
database; these are the process-level defaults and tunables.
"""

import os


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "squarehead-service")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "8010"))

    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./squarehead.db")
    POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "300"))

    EMAIL_SERVICE_URL: str = os.getenv("EMAIL_SERVICE_URL", "")
    EMAIL_TIMEOUT: float = float(os.getenv("EMAIL_TIMEOUT", "3.0"))

    DEFAULT_REMINDER_DAYS: str = os.getenv("DEFAULT_REMINDER_DAYS", "14,7,3,1")
    DEFAULT_CLUB_DAY: str = os.getenv("DEFAULT_CLUB_DAY", "Wednesday")
    DEFAULT_TIMEZONE: str = os.getenv("DEFAULT_TIMEZONE", "UTC")
    ROTATION_LOOKBACK_DAYS: int = int(os.getenv("ROTATION_LOOKBACK_DAYS", "0"))

    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
