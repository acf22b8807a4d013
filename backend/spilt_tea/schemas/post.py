"""Post Pydantic schemas for request/response validation."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from spilt_tea.models.enums import Gender, PostType
from spilt_tea.schemas.auth import UserBrief
from spilt_tea.schemas.common import reject_null
from spilt_tea.schemas.person import PersonResponse


class PostCreateRequest(BaseModel):
    """Request to create a post."""
    model_config = ConfigDict(use_enum_values=True)

    type: PostType
    title: str = Field(min_length=1, max_length=300)
    content: str = Field(min_length=1)
    person_id: Optional[UUID] = None
    # Legacy free-text subject fields, superseded by person_id
    person_name: Optional[str] = Field(default=None, max_length=200)
    person_age: Optional[int] = Field(default=None, ge=0, le=150)
    person_gender: Optional[Gender] = None
    person_location: Optional[str] = Field(default=None, max_length=200)
    evidence_urls: List[str] = []
    is_anonymous: bool = False
    is_published: bool = True


class PostUpdateRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    type: Optional[PostType] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=300)
    content: Optional[str] = Field(default=None, min_length=1)
    person_id: Optional[UUID] = None
    person_name: Optional[str] = Field(default=None, max_length=200)
    person_age: Optional[int] = Field(default=None, ge=0, le=150)
    person_gender: Optional[Gender] = None
    person_location: Optional[str] = Field(default=None, max_length=200)
    evidence_urls: Optional[List[str]] = None
    is_anonymous: Optional[bool] = None
    is_published: Optional[bool] = None

    @field_validator("type", "title", "content", "evidence_urls", "is_anonymous", "is_published")
    @classmethod
    def not_null(cls, value):
        # Omitted means unchanged; these columns cannot be cleared
        return reject_null(value)


class PostResponse(BaseModel):
    """Aggregated post: vote counts instead of vote rows, masked person phone."""

    id: UUID
    author_id: UUID
    person_id: Optional[UUID] = None
    type: str
    title: str
    content: str
    person_name: Optional[str] = None
    person_age: Optional[int] = None
    person_gender: Optional[str] = None
    person_location: Optional[str] = None
    evidence_urls: List[str] = []
    is_anonymous: bool
    is_published: bool
    view_count: int
    created_at: datetime
    updated_at: datetime
    author: Optional[UserBrief] = None
    person: Optional[PersonResponse] = None
    upvotes: int
    downvotes: int
    comment_count: int


class TrendingPostResponse(PostResponse):
    trending_score: float
