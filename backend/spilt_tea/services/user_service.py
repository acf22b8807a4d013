"""User profile service."""

import uuid
from typing import Any, Dict

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from spilt_tea.core.exceptions import NotFoundError
from spilt_tea.models.user import User

logger = structlog.get_logger(__name__)

PROFILE_FIELDS = ("first_name", "last_name", "bio", "profile_image_url")


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logger.bind(service="user_service")

    async def get_profile(self, user_id: uuid.UUID) -> User:
        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if not user:
            raise NotFoundError("User", str(user_id))
        return user

    async def get_public_profile(self, username: str) -> User:
        """Look up an active user by username.

        Raises:
            NotFoundError: no active user has that username
        """
        result = await self.db.execute(
            select(User).where(User.username == username, User.is_active == True)
        )
        user = result.scalar_one_or_none()
        if not user:
            raise NotFoundError("User", username)
        return user

    async def update_profile(self, user_id: uuid.UUID, payload: Dict[str, Any]) -> User:
        """Apply a partial update limited to the editable profile fields."""
        user = await self.get_profile(user_id)

        changes = {k: v for k, v in payload.items() if k in PROFILE_FIELDS}
        for field, value in changes.items():
            setattr(user, field, value)
        await self.db.flush()

        self.logger.info("profile_updated", user_id=str(user_id), fields=sorted(changes))
        return user
