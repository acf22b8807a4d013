"""Comment service for post discussions.

Reads return plain dicts so a whole thread can be assembled from one query
without lazy loads.
"""

import uuid
from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from spilt_tea.core.exceptions import ForbiddenError, NotFoundError
from spilt_tea.models.comment import Comment
from spilt_tea.models.post import Post
from spilt_tea.utils.transform import user_brief

logger = structlog.get_logger(__name__)

DELETED_PLACEHOLDER = "[deleted]"


def comment_to_dict(comment: Comment) -> Dict[str, Any]:
    """Flatten a Comment with its loaded user; replies start empty."""
    return {
        "id": comment.id,
        "post_id": comment.post_id,
        "user": user_brief(comment.user),
        "parent_id": comment.parent_id,
        "content": comment.content,
        "is_deleted": comment.is_deleted,
        "created_at": comment.created_at,
        "updated_at": comment.updated_at,
        "replies": [],
    }


def build_thread(comments: List[Comment]) -> List[Dict[str, Any]]:
    """Nest comments under their parents, keeping input order at each level."""
    nodes = {c.id: comment_to_dict(c) for c in comments}
    roots = []
    for comment in comments:
        node = nodes[comment.id]
        parent = nodes.get(comment.parent_id) if comment.parent_id else None
        if parent is None:
            roots.append(node)
        else:
            parent["replies"].append(node)
    return roots


class CommentService:
    """Handles CRUD operations for post comments."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logger.bind(service="comment_service")

    async def _ensure_post(self, post_id: uuid.UUID) -> None:
        post_check = await self.db.execute(select(Post.id).where(Post.id == post_id))
        if post_check.scalar_one_or_none() is None:
            raise NotFoundError("Post", str(post_id))

    async def _get_live_comment(
        self,
        comment_id: uuid.UUID,
        post_id: Optional[uuid.UUID] = None,
    ) -> Comment:
        stmt = select(Comment).where(
            Comment.id == comment_id,
            Comment.is_deleted == False,
        )
        if post_id is not None:
            stmt = stmt.where(Comment.post_id == post_id)
        result = await self.db.execute(stmt)
        comment = result.scalar_one_or_none()
        if not comment:
            raise NotFoundError("Comment", str(comment_id))
        return comment

    async def _reload(self, comment: Comment) -> Dict[str, Any]:
        await self.db.refresh(comment, ["user", "updated_at"])
        return comment_to_dict(comment)

    async def get_comments_for_post(self, post_id: uuid.UUID) -> List[Dict[str, Any]]:
        """Get all top-level comments for a post with nested replies.

        Deleted comments stay in the thread with placeholder content so their
        replies keep a parent.
        """
        await self._ensure_post(post_id)

        stmt = (
            select(Comment)
            .where(Comment.post_id == post_id)
            .options(selectinload(Comment.user))
            .order_by(Comment.created_at.asc())
        )
        result = await self.db.execute(stmt)
        return build_thread(list(result.scalars().all()))

    async def create_comment(
        self,
        post_id: uuid.UUID,
        user_id: uuid.UUID,
        content: str,
        parent_id: Optional[uuid.UUID] = None,
    ) -> Dict[str, Any]:
        """Create a comment or reply on a post.

        Raises:
            NotFoundError: post does not exist, or the parent is not a live
                comment on the same post
        """
        await self._ensure_post(post_id)

        # Validate parent comment if replying
        if parent_id:
            await self._get_live_comment(parent_id, post_id=post_id)

        comment = Comment(
            post_id=post_id,
            user_id=user_id,
            content=content,
            parent_id=parent_id,
        )
        self.db.add(comment)
        await self.db.flush()

        self.logger.info("comment_created", comment_id=str(comment.id), post_id=str(post_id))
        return await self._reload(comment)

    async def update_comment(
        self,
        comment_id: uuid.UUID,
        user_id: uuid.UUID,
        content: str,
        post_id: Optional[uuid.UUID] = None,
    ) -> Dict[str, Any]:
        """Update a comment's content. Only the author can edit.

        Raises:
            NotFoundError: comment does not exist or was deleted
            ForbiddenError: caller is not the author
        """
        comment = await self._get_live_comment(comment_id, post_id=post_id)
        if str(comment.user_id) != str(user_id):
            raise ForbiddenError("You can only update your own comments")

        comment.content = content
        await self.db.flush()
        return await self._reload(comment)

    async def delete_comment(
        self,
        comment_id: uuid.UUID,
        user_id: uuid.UUID,
        post_id: Optional[uuid.UUID] = None,
    ) -> None:
        """Soft-delete a comment. Only the author can delete."""
        comment = await self._get_live_comment(comment_id, post_id=post_id)
        if str(comment.user_id) != str(user_id):
            raise ForbiddenError("You can only delete your own comments")

        comment.is_deleted = True
        comment.content = DELETED_PLACEHOLDER
        await self.db.flush()

        self.logger.info("comment_deleted", comment_id=str(comment_id))
