"""String enums shared by models and schemas.

Values are stored as plain strings so the same tables work on PostgreSQL
and SQLite.
"""

import enum


class UserRole(str, enum.Enum):
    USER = "USER"
    MODERATOR = "MODERATOR"
    ADMIN = "ADMIN"


class Gender(str, enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    NON_BINARY = "NON_BINARY"
    OTHER = "OTHER"


class PostType(str, enum.Enum):
    EXPERIENCE = "EXPERIENCE"
    WARNING = "WARNING"
    VETTING_REQUEST = "VETTING_REQUEST"


class VoteType(str, enum.Enum):
    UPVOTE = "UPVOTE"
    DOWNVOTE = "DOWNVOTE"


class VettingStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
