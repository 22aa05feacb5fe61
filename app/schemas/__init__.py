# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Pydantic request/response schemas."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class EnrollRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=255, examples=["alice"])
    list_id: str = Field(..., min_length=1, max_length=255, examples=["blog_list"])
    strict: Optional[bool] = Field(
        default=None,
        description="true: user must already exist; false: create if absent; omitted: server default",
    )

    @field_validator("username", "list_id")
    @classmethod
    def strip_value(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class UserOut(BaseModel):
    username: str
    list_membership: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class ListMembers(BaseModel):
    list_id: str
    total: int
    members: List[UserOut]


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[str] = None
    request_id: Optional[str] = None
