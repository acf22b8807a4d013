"""Tests for UserService."""

from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from spilt_tea.core.exceptions import NotFoundError
from spilt_tea.models import User
from spilt_tea.services.user_service import UserService


class TestUserService:

    async def test_update_profile_ignores_protected_fields(self, test_db: AsyncSession, author: User):
        user = await UserService(test_db).update_profile(author.id, {
            "bio": "Just here for the tea",
            "role": "ADMIN",
            "email": "evil@example.com",
        })

        assert user.bio == "Just here for the tea"
        assert user.role == "USER"
        assert user.email == "author@example.com"

    async def test_public_profile(self, test_db: AsyncSession, author: User):
        user = await UserService(test_db).get_public_profile("author")
        assert user.id == author.id

    async def test_inactive_profile_hidden(self, test_db: AsyncSession, author: User):
        author.is_active = False
        await test_db.commit()

        with pytest.raises(NotFoundError):
            await UserService(test_db).get_public_profile("author")

    async def test_unknown_user(self, test_db: AsyncSession):
        with pytest.raises(NotFoundError):
            await UserService(test_db).get_profile(uuid4())
