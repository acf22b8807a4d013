"""Person Pydantic schemas for request/response validation."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from spilt_tea.models.enums import Gender
from spilt_tea.schemas.auth import UserBrief
from spilt_tea.schemas.common import reject_null


class PersonCreateRequest(BaseModel):
    """Request to add a person to the catalogue."""
    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(min_length=1, max_length=200)
    aliases: List[str] = []
    approximate_age: Optional[int] = Field(default=None, ge=18, le=120)
    gender: Optional[Gender] = None
    phone_number: Optional[str] = Field(default=None, max_length=32)
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=100)
    country: Optional[str] = Field(default=None, max_length=100)
    profile_image_url: Optional[str] = Field(default=None, max_length=1000)


class PersonUpdateRequest(BaseModel):
    """Partial update. ``is_verified`` is honoured for admins only."""
    model_config = ConfigDict(use_enum_values=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    aliases: Optional[List[str]] = None
    approximate_age: Optional[int] = Field(default=None, ge=18, le=120)
    gender: Optional[Gender] = None
    phone_number: Optional[str] = Field(default=None, max_length=32)
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=100)
    country: Optional[str] = Field(default=None, max_length=100)
    profile_image_url: Optional[str] = Field(default=None, max_length=1000)
    is_verified: Optional[bool] = None

    @field_validator("name", "aliases", "is_verified")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class PersonResponse(BaseModel):
    """Person as returned by the API; ``phone_number`` is always masked."""

    id: UUID
    name: str
    aliases: List[str] = []
    approximate_age: Optional[int] = None
    gender: Optional[str] = None
    phone_number: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    profile_image_url: Optional[str] = None
    is_verified: bool = False
    created_by_id: Optional[UUID] = None
    created_at: datetime
    post_count: Optional[int] = None


class PersonDetailResponse(PersonResponse):
    created_by: Optional[UserBrief] = None
