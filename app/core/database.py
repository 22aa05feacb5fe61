# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""SQLAlchemy engine, built on first use."""
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from app.core.config import settings


def build_engine(url: str) -> Engine:
    options = {"pool_pre_ping": True, "pool_recycle": settings.POOL_RECYCLE}
    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
    return create_engine(url, **options)


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return build_engine(settings.DATABASE_URL)
