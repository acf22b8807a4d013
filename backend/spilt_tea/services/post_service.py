"""Post CRUD service.

Reads return plain dicts shaped by ``utils.transform.shape_post``: the raw
vote rows are replaced by upvote/downvote counts and any attached person's
phone number is masked.
"""

import math
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from spilt_tea.core.exceptions import NotFoundError
from spilt_tea.models.comment import Comment
from spilt_tea.models.person import Person
from spilt_tea.models.post import Post
from spilt_tea.services.filters import EXACT, FilterSpec, apply_filter, build_filter
from spilt_tea.services.permissions import ensure_can_mutate_post
from spilt_tea.utils.transform import post_to_dict, shape_post

logger = structlog.get_logger(__name__)


def comment_count_column():
    """Correlated count of live comments, selectable alongside Post."""
    return (
        select(func.count(Comment.id))
        .where(Comment.post_id == Post.id, Comment.is_deleted == False)
        .correlate(Post)
        .scalar_subquery()
        .label("comment_count")
    )


def post_query():
    """Select (Post, comment_count) with author, person and votes eagerly loaded."""
    return select(Post, comment_count_column()).options(
        selectinload(Post.author),
        selectinload(Post.person),
        selectinload(Post.votes),
    )


def paginate(total: int, skip: int, take: int) -> Dict[str, int]:
    """Page metadata: page = skip // take + 1, total_pages = ceil(total / take)."""
    return {
        "total": total,
        "page": skip // take + 1,
        "total_pages": math.ceil(total / take) if take else 0,
    }


class PostService:
    """Service for managing posts.

    Handles creation, listing with filters, detail reads (which bump the
    view counter) and owner-only updates and deletes.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logger.bind(service="post_service")

    async def _fetch_rows(self, stmt) -> List[Tuple[Post, int]]:
        result = await self.db.execute(stmt)
        return [(row[0], row[1] or 0) for row in result.all()]

    async def _get_post(self, post_id: UUID) -> Post:
        result = await self.db.execute(select(Post).where(Post.id == post_id))
        post = result.scalar_one_or_none()
        if not post:
            raise NotFoundError("Post", str(post_id))
        return post

    async def _ensure_person(self, person_id: Optional[UUID]) -> None:
        if person_id is None:
            return
        exists = await self.db.execute(select(Person.id).where(Person.id == person_id))
        if exists.scalar_one_or_none() is None:
            raise NotFoundError("Person", str(person_id))

    async def _get_shaped(self, post_id: UUID) -> Dict[str, Any]:
        rows = await self._fetch_rows(
            post_query().where(Post.id == post_id).execution_options(populate_existing=True)
        )
        if not rows:
            raise NotFoundError("Post", str(post_id))
        post, comment_count = rows[0]
        return shape_post(post_to_dict(post, comment_count))

    async def create(self, author_id: UUID, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create a post authored by ``author_id``.

        Raises:
            NotFoundError: payload references a person that does not exist
        """
        await self._ensure_person(payload.get("person_id"))

        post = Post(author_id=author_id, **payload)
        self.db.add(post)
        await self.db.flush()

        self.logger.info("post_created", post_id=str(post.id), author_id=str(author_id), type=post.type)
        return await self._get_shaped(post.id)

    async def find_all(
        self,
        skip: int = 0,
        take: int = 20,
        post_type: Optional[str] = None,
        author_id: Optional[UUID] = None,
        person_id: Optional[UUID] = None,
    ) -> Dict[str, Any]:
        """List published posts, newest first.

        Returns:
            dict with ``posts``, ``total``, ``page`` and ``total_pages``
        """
        clause = build_filter(Post, [
            FilterSpec("is_published", True, EXACT),
            FilterSpec("type", post_type, EXACT),
            FilterSpec("author_id", author_id, EXACT),
            FilterSpec("person_id", person_id, EXACT),
        ])

        stmt = apply_filter(post_query(), clause).order_by(Post.created_at.desc()).offset(skip).limit(take)
        rows = await self._fetch_rows(stmt)

        count_stmt = apply_filter(select(func.count(Post.id)), clause)
        total = (await self.db.execute(count_stmt)).scalar() or 0

        self.logger.info("posts_fetched", count=len(rows), total=total, skip=skip, take=take)

        return {
            "posts": [shape_post(post_to_dict(post, count)) for post, count in rows],
            **paginate(total, skip, take),
        }

    async def find_one(self, post_id: UUID) -> Dict[str, Any]:
        """Get a single post and count the read.

        The view counter is incremented atomically in the database, exactly
        once per call.

        Raises:
            NotFoundError: post does not exist
        """
        shaped = await self._get_shaped(post_id)

        result = await self.db.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(view_count=Post.view_count + 1)
            .returning(Post.view_count)
            .execution_options(synchronize_session=False)
        )
        shaped["view_count"] = result.scalar_one()

        self.logger.info("post_viewed", post_id=str(post_id), view_count=shaped["view_count"])
        return shaped

    async def update(self, post_id: UUID, user_id: UUID, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Apply a partial update. Only the author may edit.

        Raises:
            NotFoundError: post does not exist
            ForbiddenError: caller is not the author
        """
        post = await self._get_post(post_id)
        ensure_can_mutate_post(post, user_id, action="update")
        await self._ensure_person(payload.get("person_id"))

        for field, value in payload.items():
            setattr(post, field, value)
        await self.db.flush()

        self.logger.info("post_updated", post_id=str(post_id), fields=sorted(payload))
        return await self._get_shaped(post_id)

    async def remove(self, post_id: UUID, user_id: UUID) -> Dict[str, str]:
        """Delete a post. Only the author may delete.

        Raises:
            NotFoundError: post does not exist
            ForbiddenError: caller is not the author
        """
        post = await self._get_post(post_id)
        ensure_can_mutate_post(post, user_id, action="delete")

        await self.db.delete(post)
        await self.db.flush()

        self.logger.info("post_deleted", post_id=str(post_id))
        return {"message": "Post deleted successfully"}
