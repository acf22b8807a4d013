"""Pydantic schemas for the Spilt Tea API.

All request/response models are defined here for easy import.
"""

from spilt_tea.schemas.common import ApiResponse, ErrorDetail, ErrorResponse, MessageResponse, PaginationMeta
from spilt_tea.schemas.auth import (
    LoginRequest,
    PhoneOtpRequest,
    PhoneVerifyRequest,
    RegisterRequest,
    TokenResponse,
    UserBrief,
    UserResponse,
)
from spilt_tea.schemas.user import ProfileUpdateRequest, PublicUserResponse
from spilt_tea.schemas.person import (
    PersonCreateRequest,
    PersonDetailResponse,
    PersonResponse,
    PersonUpdateRequest,
)
from spilt_tea.schemas.post import PostCreateRequest, PostResponse, PostUpdateRequest, TrendingPostResponse
from spilt_tea.schemas.vote import VoteRequest, VoteResponse
from spilt_tea.schemas.comment import CommentCreateRequest, CommentResponse, CommentUpdateRequest
from spilt_tea.schemas.vetting import VettingCreateRequest, VettingResponse, VettingStatusUpdateRequest
from spilt_tea.schemas.search import SearchAllResponse, SearchTotals
from spilt_tea.schemas.health import HealthCheckResponse

__all__ = [
    # Common
    "ApiResponse",
    "ErrorDetail",
    "ErrorResponse",
    "MessageResponse",
    "PaginationMeta",
    # Auth
    "LoginRequest",
    "PhoneOtpRequest",
    "PhoneVerifyRequest",
    "RegisterRequest",
    "TokenResponse",
    "UserBrief",
    "UserResponse",
    # User
    "ProfileUpdateRequest",
    "PublicUserResponse",
    # Person
    "PersonCreateRequest",
    "PersonDetailResponse",
    "PersonResponse",
    "PersonUpdateRequest",
    # Post
    "PostCreateRequest",
    "PostResponse",
    "PostUpdateRequest",
    "TrendingPostResponse",
    # Vote
    "VoteRequest",
    "VoteResponse",
    # Comment
    "CommentCreateRequest",
    "CommentResponse",
    "CommentUpdateRequest",
    # Vetting
    "VettingCreateRequest",
    "VettingResponse",
    "VettingStatusUpdateRequest",
    # Search
    "SearchAllResponse",
    "SearchTotals",
    # Health
    "HealthCheckResponse",
]
