# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection — default collaborators.

Each getter builds its singleton on first call and imports the
implementation only then. Tests replace them via ``app.dependency_overrides``
or by passing collaborators straight to ``enroll``.
"""
from functools import lru_cache

from app.core.config import DIRECTORY_BACKENDS, settings
from app.core.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_user_directory():
    backend = settings.DIRECTORY_BACKEND
    if backend not in DIRECTORY_BACKENDS:
        raise ValueError(f"DIRECTORY_BACKEND must be one of {DIRECTORY_BACKENDS}, got '{backend}'")

    if backend == "memory":
        from app.repositories.memory_user_repository import InMemoryUserDirectory
        logger.info("User directory backend=memory")
        return InMemoryUserDirectory()

    from app.core.database import get_engine
    from app.repositories.user_repository import SqlUserDirectory
    directory = SqlUserDirectory(get_engine())
    directory.create_schema()
    logger.info("User directory backend=sql")
    return directory


@lru_cache(maxsize=1)
def get_notifier():
    from app.services.notification_client import HttpNotifier, LogNotifier
    if settings.NOTIFICATION_SERVICE_URL:
        logger.info("Notifier=http url=%s", settings.NOTIFICATION_SERVICE_URL)
        return HttpNotifier(settings.NOTIFICATION_SERVICE_URL, settings.NOTIFICATION_TIMEOUT)
    logger.info("Notifier=log (NOTIFICATION_SERVICE_URL not set)")
    return LogNotifier()


def reset_dependencies() -> None:
    """Drop cached collaborators so the next call rebuilds them from settings."""
    get_user_directory.cache_clear()
    get_notifier.cache_clear()
