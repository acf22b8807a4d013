"""Search service for persons, posts and users, plus the trending feed.

Matching is case-insensitive substring (ILIKE) so it works the same on
PostgreSQL and SQLite. Every result that carries a person has its phone
number masked.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from spilt_tea.config import settings
from spilt_tea.models.person import Person
from spilt_tea.models.post import Post
from spilt_tea.models.user import User
from spilt_tea.services.filters import (
    CONTAINS,
    DIGITS,
    EXACT,
    AnyOf,
    FilterSpec,
    apply_filter,
    build_filter,
)
from spilt_tea.services.person_service import general_person_query, post_count_column
from spilt_tea.services.post_service import paginate, post_query
from spilt_tea.services.trending import compute_trending
from spilt_tea.utils.transform import mask_person, person_to_dict, post_to_dict, shape_post

logger = structlog.get_logger(__name__)


def public_user(user: User) -> Dict[str, Any]:
    """Fields of a user that are safe to expose in search results."""
    return {
        "id": user.id,
        "username": user.username,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "bio": user.bio,
        "profile_image_url": user.profile_image_url,
        "created_at": user.created_at,
    }


class SearchService:
    """Service for cross-entity search and trending post ranking."""

    def __init__(self, db: AsyncSession):
        """Initialize search service.

        Args:
            db: Async database session
        """
        self.db = db
        self.logger = logger.bind(service="search_service")

    async def search_persons(
        self,
        query: Optional[str] = None,
        name: Optional[str] = None,
        phone_number: Optional[str] = None,
        city: Optional[str] = None,
        state: Optional[str] = None,
        skip: int = 0,
        take: int = 20,
    ) -> Dict[str, Any]:
        """Search persons with any combination of filters.

        ``query`` matches name, alias or city; the other filters narrow the
        result further. ``phone_number`` is compared on digits only. With no
        filters at all every person is returned. Verified persons sort
        first, then newest.

        Returns:
            dict with ``persons``, ``total``, ``page`` and ``total_pages``
        """
        self.logger.info(
            "searching_persons",
            query=query,
            name=name,
            has_phone=bool(phone_number),
            city=city,
            state=state,
        )

        clause = build_filter(Person, [
            general_person_query(query),
            FilterSpec("name", name, CONTAINS),
            FilterSpec("phone_number", phone_number, DIGITS),
            FilterSpec("city", city, CONTAINS),
            FilterSpec("state", state, CONTAINS),
        ])

        stmt = (
            apply_filter(select(Person, post_count_column()), clause)
            .order_by(Person.is_verified.desc(), Person.created_at.desc())
            .offset(skip)
            .limit(take)
        )
        rows = (await self.db.execute(stmt)).all()
        total = (await self.db.execute(apply_filter(select(func.count(Person.id)), clause))).scalar() or 0

        self.logger.info("person_search_completed", results=len(rows), total=total)

        return {
            "persons": [mask_person(person_to_dict(p, c or 0)) for p, c in rows],
            **paginate(total, skip, take),
        }

    async def search_posts(self, query: str, skip: int = 0, take: int = 20) -> Dict[str, Any]:
        """Published posts whose title or content contains ``query``."""
        clause = build_filter(Post, [
            FilterSpec("is_published", True, EXACT),
            AnyOf((
                FilterSpec("title", query, CONTAINS),
                FilterSpec("content", query, CONTAINS),
            )),
        ])

        stmt = apply_filter(post_query(), clause).order_by(Post.created_at.desc()).offset(skip).limit(take)
        rows = (await self.db.execute(stmt)).all()
        total = (await self.db.execute(apply_filter(select(func.count(Post.id)), clause))).scalar() or 0

        self.logger.info("post_search_completed", query=query, results=len(rows), total=total)

        return {
            "posts": [shape_post(post_to_dict(p, c or 0)) for p, c in rows],
            **paginate(total, skip, take),
        }

    async def search_users(self, query: str, skip: int = 0, take: int = 20) -> Dict[str, Any]:
        """Active, non-banned users matching username or first/last name."""
        clause = build_filter(User, [
            AnyOf((
                FilterSpec("username", query, CONTAINS),
                FilterSpec("first_name", query, CONTAINS),
                FilterSpec("last_name", query, CONTAINS),
            )),
            FilterSpec("is_active", True, EXACT),
            FilterSpec("is_banned", False, EXACT),
        ])

        stmt = apply_filter(select(User), clause).order_by(User.created_at.desc()).offset(skip).limit(take)
        users = (await self.db.execute(stmt)).scalars().all()
        total = (await self.db.execute(apply_filter(select(func.count(User.id)), clause))).scalar() or 0

        return {
            "users": [public_user(u) for u in users],
            **paginate(total, skip, take),
        }

    async def search_all(self, query: str, take: int = 10) -> Dict[str, Any]:
        """First ``take`` persons, posts and users for ``query`` with totals."""
        persons = await self.search_persons(query=query, take=take)
        posts = await self.search_posts(query, take=take)
        users = await self.search_users(query, take=take)

        return {
            "persons": persons["persons"],
            "posts": posts["posts"],
            "users": users["users"],
            "totals": {
                "persons": persons["total"],
                "posts": posts["total"],
                "users": users["total"],
            },
        }

    async def get_trending_posts(
        self,
        limit: int = 10,
        now: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        """Rank recent published posts by trending score.

        Candidates are the newest TRENDING_CANDIDATE_LIMIT published posts
        from the last TRENDING_WINDOW_DAYS days; they are scored in memory
        and the top ``limit`` returned.
        """
        now = now or datetime.now(timezone.utc)
        since = now - timedelta(days=settings.TRENDING_WINDOW_DAYS)

        stmt = (
            post_query()
            .where(Post.is_published == True, Post.created_at >= since)
            .order_by(Post.created_at.desc())
            .limit(settings.TRENDING_CANDIDATE_LIMIT)
        )
        rows = (await self.db.execute(stmt)).all()
        candidates = [post_to_dict(p, c or 0) for p, c in rows]

        trending = compute_trending(candidates, limit, now=now)

        self.logger.info("trending_posts_computed", candidates=len(candidates), returned=len(trending))
        return trending
