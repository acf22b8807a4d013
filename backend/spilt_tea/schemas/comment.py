"""Comment schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from spilt_tea.schemas.auth import UserBrief


class CommentBody(BaseModel):
    content: str = Field(min_length=1, max_length=2000)

    @field_validator("content")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Comment cannot be empty")
        return value


class CommentCreateRequest(CommentBody):
    parent_id: Optional[UUID] = None


class CommentUpdateRequest(CommentBody):
    pass


class CommentResponse(BaseModel):
    """A comment and its replies, nested to any depth.

    Deleted comments keep their place in the thread with placeholder content.
    """

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    post_id: UUID
    parent_id: Optional[UUID] = None
    user: UserBrief
    content: str
    is_deleted: bool = False
    created_at: datetime
    updated_at: datetime
    replies: List["CommentResponse"] = []
