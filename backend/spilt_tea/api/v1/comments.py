"""Post comment threads, mounted under /posts."""

from typing import Any, Dict
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from spilt_tea.dependencies import get_current_user, get_db
from spilt_tea.models.user import User
from spilt_tea.schemas import ApiResponse, MessageResponse
from spilt_tea.schemas.comment import CommentCreateRequest, CommentResponse, CommentUpdateRequest
from spilt_tea.services.comment_service import CommentService

router = APIRouter()


def _shaped(comment: Dict[str, Any]) -> Dict[str, Any]:
    return CommentResponse.model_validate(comment).model_dump(mode="json")


@router.get("/{post_id}/comments", response_model=ApiResponse)
async def get_post_comments(post_id: UUID, db: AsyncSession = Depends(get_db)):
    """Top-level comments oldest first, each with its replies nested."""
    thread = await CommentService(db).get_comments_for_post(post_id)
    return ApiResponse(status="success", data=[_shaped(c) for c in thread])


@router.post("/{post_id}/comments", response_model=ApiResponse, status_code=201)
async def add_comment(
    post_id: UUID,
    body: CommentCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Comment on a post, or reply when ``parent_id`` names a comment on it."""
    comment = await CommentService(db).create_comment(
        post_id, current_user.id, body.content, parent_id=body.parent_id
    )
    return ApiResponse(status="success", data=_shaped(comment))


@router.put("/{post_id}/comments/{comment_id}", response_model=ApiResponse)
async def edit_comment(
    post_id: UUID,
    comment_id: UUID,
    body: CommentUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await CommentService(db).update_comment(
        comment_id, current_user.id, body.content, post_id=post_id
    )
    return ApiResponse(status="success", data=_shaped(comment))


@router.delete("/{post_id}/comments/{comment_id}", response_model=ApiResponse)
async def remove_comment(
    post_id: UUID,
    comment_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Soft delete. Replies stay visible under a placeholder."""
    await CommentService(db).delete_comment(comment_id, current_user.id, post_id=post_id)
    return ApiResponse(status="success", data=MessageResponse(message="Comment deleted successfully"))
