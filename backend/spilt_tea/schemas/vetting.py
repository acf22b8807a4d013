"""Vetting request schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from spilt_tea.models.enums import Gender, VettingStatus
from spilt_tea.schemas.auth import UserBrief


class VettingCreateRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    target_user_id: Optional[UUID] = None
    post_id: Optional[UUID] = None
    target_name: str = Field(min_length=1, max_length=200)
    target_age: Optional[int] = Field(default=None, ge=0, le=150)
    target_gender: Optional[Gender] = None
    target_location: Optional[str] = Field(default=None, max_length=200)
    target_description: Optional[str] = None


class VettingStatusUpdateRequest(BaseModel):
    status: VettingStatus


class VettingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    author: UserBrief
    target_user: Optional[UserBrief] = None
    post_id: Optional[UUID] = None
    target_name: str
    target_age: Optional[int] = None
    target_gender: Optional[str] = None
    target_location: Optional[str] = None
    target_description: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime
