"""User model for authentication and community features."""

from datetime import date, datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String, Boolean, Date, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spilt_tea.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from spilt_tea.models.enums import UserRole

if TYPE_CHECKING:
    from spilt_tea.models.comment import Comment
    from spilt_tea.models.post import Post
    from spilt_tea.models.vote import Vote


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Registered community member.

    Supports email/password authentication with bcrypt hashing, email
    verification by token and phone verification by one-time code.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(320), unique=True, nullable=False, index=True,
        comment="User email address (unique)"
    )
    username: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True,
        comment="Public handle"
    )
    hashed_password: Mapped[str] = mapped_column(
        String(128), nullable=False,
        comment="bcrypt hashed password"
    )
    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    profile_image_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    phone_number: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    gender: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=UserRole.USER.value,
        comment="'USER', 'MODERATOR' or 'ADMIN'"
    )
    email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    email_verification_token: Mapped[Optional[str]] = mapped_column(
        String(64), nullable=True, index=True,
    )
    phone_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
        comment="Whether user account is active"
    )
    is_banned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True,
        comment="Last login timestamp"
    )

    # Relationships
    posts: Mapped[List["Post"]] = relationship(
        back_populates="author", cascade="all, delete-orphan"
    )
    comments: Mapped[List["Comment"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    votes: Mapped[List["Vote"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
