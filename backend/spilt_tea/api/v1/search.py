"""Search API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from spilt_tea.dependencies import get_db
from spilt_tea.schemas import (
    ApiResponse,
    PaginationMeta,
    PersonResponse,
    PostResponse,
    PublicUserResponse,
    SearchAllResponse,
)
from spilt_tea.services.search_service import SearchService

router = APIRouter()


@router.get("", response_model=ApiResponse)
async def search_all(
    q: str = Query(..., min_length=1, description="Search query"),
    limit: int = Query(10, ge=1, le=50, description="Results per kind"),
    db: AsyncSession = Depends(get_db),
):
    """Search persons, posts and users at once."""
    service = SearchService(db)
    results = await service.search_all(q, take=limit)
    return ApiResponse(status="success", data=SearchAllResponse(**results))


@router.get("/persons", response_model=ApiResponse)
async def search_persons(
    q: Optional[str] = Query(None, description="Name, alias or city"),
    name: Optional[str] = Query(None),
    phone_number: Optional[str] = Query(None, description="Matched on digits only"),
    city: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """Search persons by any combination of filters. Verified persons first."""
    service = SearchService(db)
    listing = await service.search_persons(
        query=q,
        name=name,
        phone_number=phone_number,
        city=city,
        state=state,
        skip=(page - 1) * limit,
        take=limit,
    )
    return ApiResponse(
        status="success",
        data=[PersonResponse(**p) for p in listing["persons"]],
        meta=PaginationMeta.from_listing(listing, limit),
    )


@router.get("/posts", response_model=ApiResponse)
async def search_posts(
    q: str = Query(..., min_length=1),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    service = SearchService(db)
    listing = await service.search_posts(q, skip=(page - 1) * limit, take=limit)
    return ApiResponse(
        status="success",
        data=[PostResponse(**p) for p in listing["posts"]],
        meta=PaginationMeta.from_listing(listing, limit),
    )


@router.get("/users", response_model=ApiResponse)
async def search_users(
    q: str = Query(..., min_length=1),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    service = SearchService(db)
    listing = await service.search_users(q, skip=(page - 1) * limit, take=limit)
    return ApiResponse(
        status="success",
        data=[PublicUserResponse(**u) for u in listing["users"]],
        meta=PaginationMeta.from_listing(listing, limit),
    )
