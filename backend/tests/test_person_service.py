"""Tests for PersonService."""

from uuid import uuid4

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from spilt_tea.core.exceptions import ForbiddenError, NotFoundError
from spilt_tea.models import Person, Post, User
from spilt_tea.services.person_service import PersonService


class TestPersonService:

    async def test_create_masks_phone(self, test_db: AsyncSession, author: User):
        service = PersonService(test_db)

        person = await service.create(author.id, {
            "name": "Riley Quinn",
            "aliases": ["RQ"],
            "phone_number": "555-000-1111",
        })

        assert person["name"] == "Riley Quinn"
        assert person["phone_number"] == "******1111"
        assert person["post_count"] == 0

        stored = await test_db.execute(select(Person.phone_number).where(Person.id == person["id"]))
        assert stored.scalar() == "555-000-1111"

    async def test_find_one_includes_creator_and_post_count(
        self, test_db: AsyncSession, sample_person: Person, sample_post: Post
    ):
        person = await PersonService(test_db).find_one(sample_person.id)

        assert person["post_count"] == 1
        assert person["created_by"]["username"] == "author"
        assert person["phone_number"] == "******4567"

    async def test_find_one_not_found(self, test_db: AsyncSession):
        with pytest.raises(NotFoundError):
            await PersonService(test_db).find_one(uuid4())

    async def test_search_by_name_alias_or_city(self, test_db: AsyncSession, sample_person: Person):
        service = PersonService(test_db)

        assert (await service.search("jordan"))["total"] == 1
        assert (await service.search("Jordy"))["total"] == 1
        assert (await service.search("austin"))["total"] == 1
        assert (await service.search("nobody"))["total"] == 0

    async def test_empty_search_lists_everyone(self, test_db: AsyncSession, sample_person: Person):
        listing = await PersonService(test_db).search("")
        assert listing["total"] == 1
        assert listing["persons"][0]["phone_number"] == "******4567"

    async def test_find_person_posts(
        self, test_db: AsyncSession, sample_person: Person, sample_post: Post
    ):
        listing = await PersonService(test_db).find_person_posts(sample_person.id)

        assert listing["person"]["name"] == "Jordan Smith"
        assert listing["total"] == 1
        assert listing["posts"][0]["person"]["phone_number"] == "******4567"

    async def test_find_person_posts_unknown_person(self, test_db: AsyncSession):
        with pytest.raises(NotFoundError):
            await PersonService(test_db).find_person_posts(uuid4())

    async def test_creator_update_drops_is_verified(
        self, test_db: AsyncSession, sample_person: Person, author: User
    ):
        person = await PersonService(test_db).update(
            sample_person.id, author.id, "USER", {"city": "Houston", "is_verified": True}
        )

        assert person["city"] == "Houston"
        assert person["is_verified"] is False

    async def test_admin_may_verify(
        self, test_db: AsyncSession, sample_person: Person, admin_user: User
    ):
        person = await PersonService(test_db).update(
            sample_person.id, admin_user.id, "ADMIN", {"is_verified": True}
        )
        assert person["is_verified"] is True

    async def test_non_creator_update_forbidden(
        self, test_db: AsyncSession, sample_person: Person, other_user: User
    ):
        with pytest.raises(ForbiddenError):
            await PersonService(test_db).update(sample_person.id, other_user.id, "USER", {"city": "X"})

    async def test_remove_is_admin_only(
        self, test_db: AsyncSession, sample_person: Person, author: User, admin_user: User
    ):
        service = PersonService(test_db)

        with pytest.raises(ForbiddenError):
            await service.remove(sample_person.id, author.id, "USER")

        result = await service.remove(sample_person.id, admin_user.id, "ADMIN")
        assert result == {"message": "Person deleted successfully"}

        with pytest.raises(NotFoundError):
            await service.find_one(sample_person.id)

    async def test_remove_unknown_person_is_not_found_even_for_users(
        self, test_db: AsyncSession, author: User
    ):
        with pytest.raises(NotFoundError):
            await PersonService(test_db).remove(uuid4(), author.id, "USER")
