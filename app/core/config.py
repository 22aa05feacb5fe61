# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration — all env-driven.
Read once at import; tests patch attributes on ``settings`` directly.
"""

import os

LOOKUP_MODES: tuple[str, ...] = ("find_or_create", "strict")
NOTIFICATION_FAILURE_POLICIES: tuple[str, ...] = ("raise", "ignore")
DIRECTORY_BACKENDS: tuple[str, ...] = ("sql", "memory")


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "mailing-list-service")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "8005"))

    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./mailing_list.db")
    DIRECTORY_BACKEND: str = os.getenv("DIRECTORY_BACKEND", "sql").lower()
    POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "300"))

    NOTIFICATION_SERVICE_URL: str = os.getenv("NOTIFICATION_SERVICE_URL", "")
    NOTIFICATION_TIMEOUT: float = float(os.getenv("NOTIFICATION_TIMEOUT", "3.0"))
    NOTIFICATION_FAILURE_POLICY: str = os.getenv("NOTIFICATION_FAILURE_POLICY", "raise").lower()

    USER_LOOKUP_MODE: str = os.getenv("USER_LOOKUP_MODE", "find_or_create").lower()

    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
