"""Person model: a catalogued subject that posts can reference."""

import uuid
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String, ForeignKey, Boolean, Integer, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spilt_tea.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from spilt_tea.models.user import User
    from spilt_tea.models.post import Post


class Person(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Catalogued subject. Only admins may verify or delete one."""

    __tablename__ = "persons"

    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    aliases: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    approximate_age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    gender: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    phone_number: Mapped[Optional[str]] = mapped_column(
        String(32), nullable=True,
        comment="Stored raw; always masked on output"
    )
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    profile_image_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Relationships
    created_by: Mapped[Optional["User"]] = relationship()
    posts: Mapped[List["Post"]] = relationship(back_populates="person")

    def __repr__(self) -> str:
        return f"<Person(id={self.id}, name='{self.name}')>"
