"""Vetting request API endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from spilt_tea.dependencies import get_db, get_current_user, require_moderator
from spilt_tea.models.enums import VettingStatus
from spilt_tea.models.user import User
from spilt_tea.schemas import (
    ApiResponse,
    PaginationMeta,
    VettingCreateRequest,
    VettingResponse,
    VettingStatusUpdateRequest,
)
from spilt_tea.services.vetting_service import VettingService

router = APIRouter()


def _listing_response(listing, limit: int) -> ApiResponse:
    return ApiResponse(
        status="success",
        data=[VettingResponse.model_validate(r).model_dump(mode="json") for r in listing["requests"]],
        meta=PaginationMeta.from_listing(listing, limit),
    )


@router.post("", response_model=ApiResponse, status_code=201)
async def create_vetting_request(
    body: VettingCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    service = VettingService(db)
    request = await service.create(current_user.id, body.model_dump())
    return ApiResponse(
        status="success",
        data=VettingResponse.model_validate(request).model_dump(mode="json"),
    )


@router.get("", response_model=ApiResponse)
async def list_vetting_requests(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: Optional[VettingStatus] = Query(None),
    author_id: Optional[UUID] = Query(None),
    target_user_id: Optional[UUID] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    service = VettingService(db)
    listing = await service.find_all(
        skip=(page - 1) * limit,
        take=limit,
        status=status.value if status else None,
        author_id=author_id,
        target_user_id=target_user_id,
    )
    return _listing_response(listing, limit)


@router.get("/search", response_model=ApiResponse)
async def search_vetting_requests(
    name: str = Query(..., min_length=1, description="Target name"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    service = VettingService(db)
    listing = await service.search_by_name(name, skip=(page - 1) * limit, take=limit)
    return _listing_response(listing, limit)


@router.get("/{request_id}", response_model=ApiResponse)
async def get_vetting_request(request_id: UUID, db: AsyncSession = Depends(get_db)):
    service = VettingService(db)
    request = await service.find_one(request_id)
    return ApiResponse(
        status="success",
        data=VettingResponse.model_validate(request).model_dump(mode="json"),
    )


@router.patch("/{request_id}/status", response_model=ApiResponse)
async def update_vetting_status(
    request_id: UUID,
    body: VettingStatusUpdateRequest,
    current_user: User = Depends(require_moderator),
    db: AsyncSession = Depends(get_db),
):
    """Approve or reject a vetting request. Moderators and admins only."""
    service = VettingService(db)
    request = await service.update_status(request_id, body.status)
    return ApiResponse(
        status="success",
        data=VettingResponse.model_validate(request).model_dump(mode="json"),
    )
