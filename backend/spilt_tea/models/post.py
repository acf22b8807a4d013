"""Post model: an experience, warning or vetting request authored by a user."""

import uuid
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String, Text, ForeignKey, Boolean, Integer, Index
from sqlalchemy import JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spilt_tea.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from spilt_tea.models.enums import PostType

if TYPE_CHECKING:
    from spilt_tea.models.user import User
    from spilt_tea.models.person import Person
    from spilt_tea.models.comment import Comment
    from spilt_tea.models.vote import Vote


class Post(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """User-authored content item, optionally about a catalogued person.

    Vote and comment rows are owned by the post but live in their own
    tables; response shapes derive counts from them on every read.
    """

    __tablename__ = "posts"

    author_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    person_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("persons.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PostType.EXPERIENCE.value,
        comment="'EXPERIENCE', 'WARNING' or 'VETTING_REQUEST'"
    )
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Legacy free-text subject fields (superseded by person_id)
    person_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    person_age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    person_gender: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    person_location: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    evidence_urls: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_published: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, index=True,
    )
    view_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, comment="Incremented once per detail read"
    )

    __table_args__ = (
        Index("idx_posts_published_created", "is_published", "created_at"),
    )

    # Relationships
    author: Mapped["User"] = relationship(back_populates="posts")
    person: Mapped[Optional["Person"]] = relationship(back_populates="posts")
    comments: Mapped[List["Comment"]] = relationship(
        back_populates="post", cascade="all, delete-orphan"
    )
    votes: Mapped[List["Vote"]] = relationship(
        back_populates="post", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title[:50]}', type={self.type})>"
