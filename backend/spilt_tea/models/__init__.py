"""SQLAlchemy models for Spilt Tea.

All models are imported here so metadata.create_all sees every table.
"""

from spilt_tea.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from spilt_tea.models.enums import Gender, PostType, UserRole, VettingStatus, VoteType
from spilt_tea.models.user import User
from spilt_tea.models.person import Person
from spilt_tea.models.post import Post
from spilt_tea.models.vote import Vote
from spilt_tea.models.comment import Comment
from spilt_tea.models.vetting_request import VettingRequest

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "Gender",
    "PostType",
    "UserRole",
    "VettingStatus",
    "VoteType",
    "User",
    "Person",
    "Post",
    "Vote",
    "Comment",
    "VettingRequest",
]
