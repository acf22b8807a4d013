"""Trending posts endpoint (mounted at /search/trending)."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from spilt_tea.config import settings
from spilt_tea.dependencies import get_db
from spilt_tea.schemas import ApiResponse, TrendingPostResponse
from spilt_tea.services.cache_service import cache_key_for_trending, get_cache
from spilt_tea.services.search_service import SearchService

router = APIRouter()


@router.get("", response_model=ApiResponse)
async def get_trending(
    limit: int = Query(10, ge=1, le=50, description="Number of trending posts to return"),
    db: AsyncSession = Depends(get_db),
):
    """Get trending posts.

    Ranks recent published posts by votes, comments, views and recency.
    Person phone numbers are masked.

    This endpoint is cached for TRENDING_CACHE_TTL_SECONDS; votes and post
    changes drop the cache.
    """
    # Try to get from cache
    cache = await get_cache()
    cache_key = cache_key_for_trending(limit)

    cached = await cache.get(cache_key)
    if cached:
        return ApiResponse.model_validate_json(cached)

    # Cache miss - fetch from database
    service = SearchService(db)
    trending = await service.get_trending_posts(limit=limit)

    response = ApiResponse(
        status="success",
        data=[TrendingPostResponse(**p) for p in trending],
    )

    await cache.set(cache_key, response.model_dump_json(), ttl=settings.TRENDING_CACHE_TTL_SECONDS)

    return response
