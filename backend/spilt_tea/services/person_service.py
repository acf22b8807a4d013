"""Person catalogue service.

Phone numbers are stored raw and masked on every way out.
"""

from typing import Any, Dict, Optional
from uuid import UUID

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from spilt_tea.core.exceptions import NotFoundError
from spilt_tea.models.person import Person
from spilt_tea.models.post import Post
from spilt_tea.services.filters import CONTAINS, HAS, AnyOf, FilterSpec, apply_filter, build_filter
from spilt_tea.services.permissions import (
    ensure_can_delete_person,
    ensure_can_update_person,
    sanitize_person_update,
)
from spilt_tea.services.post_service import PostService, paginate
from spilt_tea.utils.transform import mask_person, person_to_dict, user_brief

logger = structlog.get_logger(__name__)


def post_count_column():
    """Correlated count of published posts about a person."""
    return (
        select(func.count(Post.id))
        .where(Post.person_id == Person.id, Post.is_published == True)
        .correlate(Person)
        .scalar_subquery()
        .label("post_count")
    )


def general_person_query(query: Optional[str]) -> AnyOf:
    """Free-text match on name, exact alias or city."""
    return AnyOf((
        FilterSpec("name", query, CONTAINS),
        FilterSpec("aliases", query, HAS),
        FilterSpec("city", query, CONTAINS),
    ))


class PersonService:
    """Handles CRUD and lookup for catalogued persons."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logger.bind(service="person_service")

    async def _get_person(self, person_id: UUID) -> Person:
        result = await self.db.execute(select(Person).where(Person.id == person_id))
        person = result.scalar_one_or_none()
        if not person:
            raise NotFoundError("Person", str(person_id))
        return person

    async def _get_shaped(self, person_id: UUID) -> Dict[str, Any]:
        result = await self.db.execute(
            select(Person, post_count_column())
            .where(Person.id == person_id)
            .execution_options(populate_existing=True)
        )
        row = result.first()
        if row is None:
            raise NotFoundError("Person", str(person_id))
        return mask_person(person_to_dict(row[0], row[1] or 0))

    async def create(self, created_by_id: UUID, payload: Dict[str, Any]) -> Dict[str, Any]:
        person = Person(created_by_id=created_by_id, **payload)
        self.db.add(person)
        await self.db.flush()

        self.logger.info("person_created", person_id=str(person.id), created_by=str(created_by_id))
        return await self._get_shaped(person.id)

    async def search(self, query: str, skip: int = 0, take: int = 20) -> Dict[str, Any]:
        """Match ``query`` against name, aliases and city, newest first."""
        clause = build_filter(Person, [general_person_query(query)])

        stmt = (
            apply_filter(select(Person, post_count_column()), clause)
            .order_by(Person.created_at.desc())
            .offset(skip)
            .limit(take)
        )
        rows = (await self.db.execute(stmt)).all()
        total = (await self.db.execute(apply_filter(select(func.count(Person.id)), clause))).scalar() or 0

        return {
            "persons": [mask_person(person_to_dict(p, c or 0)) for p, c in rows],
            **paginate(total, skip, take),
        }

    async def find_one(self, person_id: UUID) -> Dict[str, Any]:
        """Person detail with creator and post count.

        Raises:
            NotFoundError: person does not exist
        """
        shaped = await self._get_shaped(person_id)
        person = await self._get_person(person_id)
        await self.db.refresh(person, ["created_by"])
        shaped["created_by"] = user_brief(person.created_by)
        return shaped

    async def find_person_posts(self, person_id: UUID, skip: int = 0, take: int = 20) -> Dict[str, Any]:
        """Published posts about a person.

        Raises:
            NotFoundError: person does not exist (checked before listing)
        """
        person = await self._get_shaped(person_id)
        listing = await PostService(self.db).find_all(skip=skip, take=take, person_id=person_id)
        return {"person": person, **listing}

    async def update(
        self,
        person_id: UUID,
        user_id: UUID,
        role: str,
        payload: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Update a person.

        Admins may update any person, others only the persons they created.
        ``is_verified`` from a non-admin is dropped, not rejected.

        Raises:
            NotFoundError: person does not exist
            ForbiddenError: caller is neither admin nor creator
        """
        person = await self._get_person(person_id)
        ensure_can_update_person(person, user_id, role)

        changes = sanitize_person_update(payload, role)
        for field, value in changes.items():
            setattr(person, field, value)
        await self.db.flush()

        self.logger.info("person_updated", person_id=str(person_id), fields=sorted(changes))
        return await self._get_shaped(person_id)

    async def remove(self, person_id: UUID, user_id: UUID, role: str) -> Dict[str, str]:
        """Delete a person. Admin only, even for the creator.

        Raises:
            NotFoundError: person does not exist
            ForbiddenError: caller is not an admin
        """
        person = await self._get_person(person_id)
        ensure_can_delete_person(role)

        await self.db.delete(person)
        await self.db.flush()

        self.logger.info("person_deleted", person_id=str(person_id), by=str(user_id))
        return {"message": "Person deleted successfully"}
