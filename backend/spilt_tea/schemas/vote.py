"""Vote schemas."""

from typing import Optional

from pydantic import BaseModel

from spilt_tea.models.enums import VoteType


class VoteRequest(BaseModel):
    """Request schema for voting on a post."""

    vote_type: VoteType


class VoteResponse(BaseModel):
    vote_type: Optional[VoteType] = None
    message: Optional[str] = None
