"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from spilt_tea.dependencies import get_db, get_current_user
from spilt_tea.models.user import User
from spilt_tea.schemas.auth import (
    LoginRequest,
    PhoneOtpRequest,
    PhoneVerifyRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from spilt_tea.schemas.common import ApiResponse
from spilt_tea.services.auth_service import AuthService
from spilt_tea.services.cache_service import CacheService, get_cache

router = APIRouter()


@router.post("/register", response_model=ApiResponse, status_code=201)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Register a new user account.

    No token is issued; the account must verify its email before logging in.
    """
    service = AuthService(db)
    profile = body.model_dump(exclude={"email", "password", "username"}, exclude_none=True)
    user = await service.register(
        email=body.email,
        password=body.password,
        username=body.username,
        **profile,
    )

    return ApiResponse(
        status="success",
        data={
            "user": UserResponse.model_validate(user).model_dump(mode="json"),
            "message": "Registration successful. Please check your email to verify your account.",
        },
    )


@router.post("/login", response_model=ApiResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Login with email and password."""
    service = AuthService(db)
    result = await service.login(email=body.email, password=body.password)

    return ApiResponse(
        status="success",
        data={
            "user": UserResponse.model_validate(result["user"]).model_dump(mode="json"),
            "token": TokenResponse(access_token=result["access_token"]).model_dump(),
        },
    )


@router.get("/verify-email", response_model=ApiResponse)
async def verify_email(
    token: str = Query(..., min_length=1, description="Token from the verification email"),
    db: AsyncSession = Depends(get_db),
):
    service = AuthService(db)
    user = await service.verify_email(token)
    return ApiResponse(
        status="success",
        data={
            "user": UserResponse.model_validate(user).model_dump(mode="json"),
            "message": "Email verified successfully",
        },
    )


@router.post("/request-phone-otp", response_model=ApiResponse)
async def request_phone_otp(
    body: PhoneOtpRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    """Send a six-digit code for the given phone number."""
    service = AuthService(db, cache)
    result = await service.request_phone_otp(current_user, body.phone_number)
    return ApiResponse(status="success", data=result)


@router.post("/verify-phone", response_model=ApiResponse)
async def verify_phone(
    body: PhoneVerifyRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    cache: CacheService = Depends(get_cache),
):
    service = AuthService(db, cache)
    user = await service.verify_phone_otp(current_user, body.code)
    return ApiResponse(
        status="success",
        data=UserResponse.model_validate(user).model_dump(mode="json"),
    )


@router.get("/me", response_model=ApiResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user info."""
    return ApiResponse(
        status="success",
        data=UserResponse.model_validate(current_user).model_dump(mode="json"),
    )
