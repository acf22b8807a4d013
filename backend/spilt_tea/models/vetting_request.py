"""VettingRequest model: a request for the community to vouch for someone."""

import uuid
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, Text, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spilt_tea.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from spilt_tea.models.enums import VettingStatus

if TYPE_CHECKING:
    from spilt_tea.models.user import User
    from spilt_tea.models.post import Post


class VettingRequest(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A vetting request, optionally tied to a registered user and a post."""

    __tablename__ = "vetting_requests"

    author_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    target_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True, index=True,
    )
    post_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("posts.id", ondelete="SET NULL"),
        nullable=True,
    )

    target_name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    target_age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    target_gender: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    target_location: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    target_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=VettingStatus.PENDING.value, index=True,
        comment="'PENDING', 'APPROVED' or 'REJECTED'"
    )

    # Relationships
    author: Mapped["User"] = relationship(foreign_keys=[author_id])
    target_user: Mapped[Optional["User"]] = relationship(foreign_keys=[target_user_id])
    post: Mapped[Optional["Post"]] = relationship()

    def __repr__(self) -> str:
        return f"<VettingRequest(id={self.id}, target='{self.target_name}', status={self.status})>"
