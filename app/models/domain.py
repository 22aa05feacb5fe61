# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models — pure data structures, NO FastAPI dependency.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

UPDATABLE_COLUMNS = frozenset({"list_membership"})


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(BaseModel):
    """A directory user. ``list_membership`` is the list they are enrolled in."""

    username: str = Field(..., min_length=1, max_length=255)
    list_membership: Optional[str] = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = None
