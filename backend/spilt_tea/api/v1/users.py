"""User profile API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from spilt_tea.dependencies import get_db, get_current_user
from spilt_tea.models.user import User
from spilt_tea.schemas import ApiResponse, ProfileUpdateRequest, PublicUserResponse, UserResponse
from spilt_tea.services.user_service import UserService

router = APIRouter()


@router.get("/profile", response_model=ApiResponse)
async def get_profile(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    service = UserService(db)
    user = await service.get_profile(current_user.id)
    return ApiResponse(
        status="success",
        data=UserResponse.model_validate(user).model_dump(mode="json"),
    )


@router.patch("/profile", response_model=ApiResponse)
async def update_profile(
    body: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update the caller's own profile. Omitted fields are left unchanged."""
    service = UserService(db)
    user = await service.update_profile(current_user.id, body.model_dump(exclude_unset=True))
    return ApiResponse(
        status="success",
        data=UserResponse.model_validate(user).model_dump(mode="json"),
    )


@router.get("/{username}", response_model=ApiResponse)
async def get_public_profile(username: str, db: AsyncSession = Depends(get_db)):
    service = UserService(db)
    user = await service.get_public_profile(username)
    return ApiResponse(
        status="success",
        data=PublicUserResponse.model_validate(user).model_dump(mode="json"),
    )
