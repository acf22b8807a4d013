"""Vote model: one up/down opinion per (user, post)."""

import uuid

from sqlalchemy import String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spilt_tea.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from spilt_tea.models.user import User
    from spilt_tea.models.post import Post


class Vote(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Tracks which user voted on which post; the unique key prevents duplicates."""

    __tablename__ = "votes"

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    post_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    vote_type: Mapped[str] = mapped_column(
        String(8), nullable=False,
        comment="'UPVOTE' or 'DOWNVOTE'"
    )

    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_user_post_vote"),
    )

    # Relationships
    user: Mapped["User"] = relationship(back_populates="votes")
    post: Mapped["Post"] = relationship(back_populates="votes")

    def __repr__(self) -> str:
        return f"<Vote(user={self.user_id}, post={self.post_id}, type={self.vote_type})>"
