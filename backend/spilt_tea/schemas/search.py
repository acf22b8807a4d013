"""Search Pydantic schemas for request/response validation."""

from typing import List

from pydantic import BaseModel

from spilt_tea.schemas.person import PersonResponse
from spilt_tea.schemas.post import PostResponse
from spilt_tea.schemas.user import PublicUserResponse


class SearchTotals(BaseModel):
    persons: int
    posts: int
    users: int


class SearchAllResponse(BaseModel):
    """Combined search across persons, posts and users."""

    persons: List[PersonResponse]
    posts: List[PostResponse]
    users: List[PublicUserResponse]
    totals: SearchTotals
