"""Posts API endpoints, including per-user voting."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from spilt_tea.dependencies import get_db, get_current_user
from spilt_tea.models.enums import PostType
from spilt_tea.models.user import User
from spilt_tea.schemas import (
    ApiResponse,
    MessageResponse,
    PaginationMeta,
    PostCreateRequest,
    PostResponse,
    PostUpdateRequest,
    VoteRequest,
    VoteResponse,
)
from spilt_tea.services.cache_service import invalidate_trending_cache
from spilt_tea.services.post_service import PostService
from spilt_tea.services.vote_service import VoteService

router = APIRouter()


async def _commit_then_invalidate(db: AsyncSession) -> None:
    """Drop cached trending lists only once the change is visible to other sessions."""
    await db.commit()
    await invalidate_trending_cache()


@router.post("", response_model=ApiResponse, status_code=201)
async def create_post(
    body: PostCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    service = PostService(db)
    post = await service.create(current_user.id, body.model_dump())
    await _commit_then_invalidate(db)
    return ApiResponse(status="success", data=PostResponse(**post))


@router.get("", response_model=ApiResponse)
async def list_posts(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    type: Optional[PostType] = Query(None, description="Filter by post type"),
    author_id: Optional[UUID] = Query(None, description="Filter by author"),
    db: AsyncSession = Depends(get_db),
):
    """List published posts, newest first, with vote counts."""
    service = PostService(db)
    listing = await service.find_all(
        skip=(page - 1) * limit,
        take=limit,
        post_type=type.value if type else None,
        author_id=author_id,
    )

    return ApiResponse(
        status="success",
        data=[PostResponse(**p) for p in listing["posts"]],
        meta=PaginationMeta.from_listing(listing, limit),
    )


@router.get("/{post_id}", response_model=ApiResponse)
async def get_post(post_id: UUID, db: AsyncSession = Depends(get_db)):
    """Get a post by ID. Also increments its view count."""
    service = PostService(db)
    post = await service.find_one(post_id)
    return ApiResponse(status="success", data=PostResponse(**post))


@router.patch("/{post_id}", response_model=ApiResponse)
async def update_post(
    post_id: UUID,
    body: PostUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update a post. Only the author can edit."""
    service = PostService(db)
    post = await service.update(post_id, current_user.id, body.model_dump(exclude_unset=True))
    await _commit_then_invalidate(db)
    return ApiResponse(status="success", data=PostResponse(**post))


@router.delete("/{post_id}", response_model=ApiResponse)
async def delete_post(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a post. Only the author can delete."""
    service = PostService(db)
    result = await service.remove(post_id, current_user.id)
    await _commit_then_invalidate(db)
    return ApiResponse(status="success", data=MessageResponse(**result))


@router.get("/{post_id}/vote", response_model=ApiResponse)
async def get_vote_status(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get the current user's vote on a post."""
    service = VoteService(db)
    user_vote = await service.get_user_vote(post_id, current_user.id)
    return ApiResponse(status="success", data=VoteResponse(**user_vote))


@router.post("/{post_id}/vote", response_model=ApiResponse)
async def vote_on_post(
    post_id: UUID,
    vote: VoteRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Vote on a post (UPVOTE or DOWNVOTE). Requires authentication.

    Voting the same type again toggles the vote off.
    Voting the opposite type switches the vote.
    """
    service = VoteService(db)
    result = await service.toggle_vote(post_id, current_user.id, vote.vote_type)
    await _commit_then_invalidate(db)
    return ApiResponse(status="success", data=VoteResponse(**result))
