"""Persons API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from spilt_tea.dependencies import get_db, get_current_user
from spilt_tea.models.user import User
from spilt_tea.schemas import (
    ApiResponse,
    MessageResponse,
    PaginationMeta,
    PersonCreateRequest,
    PersonDetailResponse,
    PersonResponse,
    PersonUpdateRequest,
    PostResponse,
)
from spilt_tea.services.person_service import PersonService

router = APIRouter()


@router.post("", response_model=ApiResponse, status_code=201)
async def create_person(
    body: PersonCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    service = PersonService(db)
    person = await service.create(current_user.id, body.model_dump())
    return ApiResponse(status="success", data=PersonResponse(**person))


@router.get("/search", response_model=ApiResponse)
async def search_persons(
    q: str = Query("", description="Name, alias or city"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    service = PersonService(db)
    listing = await service.search(q, skip=(page - 1) * limit, take=limit)
    return ApiResponse(
        status="success",
        data=[PersonResponse(**p) for p in listing["persons"]],
        meta=PaginationMeta.from_listing(listing, limit),
    )


@router.get("/{person_id}", response_model=ApiResponse)
async def get_person(person_id: UUID, db: AsyncSession = Depends(get_db)):
    service = PersonService(db)
    person = await service.find_one(person_id)
    return ApiResponse(status="success", data=PersonDetailResponse(**person))


@router.get("/{person_id}/posts", response_model=ApiResponse)
async def get_person_posts(
    person_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """Published posts about a person."""
    service = PersonService(db)
    listing = await service.find_person_posts(person_id, skip=(page - 1) * limit, take=limit)
    return ApiResponse(
        status="success",
        data={
            "person": PersonResponse(**listing["person"]),
            "posts": [PostResponse(**p) for p in listing["posts"]],
        },
        meta=PaginationMeta.from_listing(listing, limit),
    )


@router.patch("/{person_id}", response_model=ApiResponse)
async def update_person(
    person_id: UUID,
    body: PersonUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update a person. Admins may edit any person, others only their own."""
    service = PersonService(db)
    person = await service.update(
        person_id,
        current_user.id,
        current_user.role,
        body.model_dump(exclude_unset=True),
    )
    return ApiResponse(status="success", data=PersonResponse(**person))


@router.delete("/{person_id}", response_model=ApiResponse)
async def delete_person(
    person_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a person. Admin only."""
    service = PersonService(db)
    result = await service.remove(person_id, current_user.id, current_user.role)
    return ApiResponse(status="success", data=MessageResponse(**result))
