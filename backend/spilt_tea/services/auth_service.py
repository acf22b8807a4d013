"""Authentication service: JWT tokens, password hashing, verification flows."""

import secrets
import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from spilt_tea.config import settings
from spilt_tea.core.exceptions import BadRequestError, ConflictError, UnauthorizedError
from spilt_tea.models.user import User
from spilt_tea.services.cache_service import CacheService, cache_key_for_phone_otp

logger = structlog.get_logger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a plaintext password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plaintext password against a bcrypt hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: uuid.UUID, role: str) -> str:
    """Create a JWT access token carrying the user ID and role."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": role,
        "exp": now + timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES),
        "iat": now,
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode a JWT token and return its claims, or None if invalid."""
    try:
        return jwt.decode(
            token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        return None


def generate_otp() -> str:
    """Six-digit numeric one-time code."""
    return f"{secrets.randbelow(1_000_000):06d}"


class AuthService:
    """Handles registration, login, email and phone verification."""

    def __init__(self, db: AsyncSession, cache: Optional[CacheService] = None):
        self.db = db
        self.cache = cache
        self.logger = logger.bind(service="auth_service")

    async def register(
        self,
        email: str,
        password: str,
        username: Optional[str] = None,
        **profile: Any,
    ) -> User:
        """Register a new user with a pending email verification.

        ``profile`` carries optional User columns (first_name, last_name,
        date_of_birth, gender, phone_number).

        Raises:
            ConflictError: email or username already taken
        """
        stmt = select(User.id).where(User.email == email)
        if (await self.db.execute(stmt)).scalar_one_or_none():
            raise ConflictError("Email is already registered")

        if username:
            stmt = select(User.id).where(User.username == username)
            if (await self.db.execute(stmt)).scalar_one_or_none():
                raise ConflictError("Username is already taken")
        else:
            username = f"user_{int(time.time() * 1000)}"

        user = User(
            email=email,
            username=username,
            hashed_password=hash_password(password),
            email_verification_token=secrets.token_hex(32),
            **profile,
        )
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Email or username is already in use")

        self.logger.info("user_registered", user_id=str(user.id))
        self.logger.debug(
            "verification_email_pending",
            user_id=str(user.id),
            verification_url=(
                f"{settings.FRONTEND_URL}/verify-email?token={user.email_verification_token}"
            ),
        )
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """Verify credentials and return the user.

        Raises:
            UnauthorizedError: unknown email, wrong password, inactive or
                banned account, or unverified email when verification is
                required
        """
        stmt = select(User).where(User.email == email)
        result = await self.db.execute(stmt)
        user = result.scalar_one_or_none()

        if not user or not verify_password(password, user.hashed_password):
            raise UnauthorizedError("Invalid email or password")

        if not user.is_active or user.is_banned:
            raise UnauthorizedError("Account is disabled")

        if settings.REQUIRE_EMAIL_VERIFICATION and not user.email_verified:
            raise UnauthorizedError("Please verify your email before logging in")

        # Update last login
        user.last_login_at = datetime.now(timezone.utc)
        self.logger.info("user_logged_in", user_id=str(user.id))
        return user

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        """Authenticate and issue an access token."""
        user = await self.authenticate(email, password)
        return {
            "access_token": create_access_token(user.id, user.role),
            "token_type": "bearer",
            "user": user,
        }

    async def verify_email(self, token: str) -> User:
        """Consume an email verification token.

        Raises:
            BadRequestError: token is unknown or already used
        """
        stmt = select(User).where(User.email_verification_token == token)
        result = await self.db.execute(stmt)
        user = result.scalar_one_or_none()
        if not token or not user:
            raise BadRequestError("Invalid or expired verification token")

        user.email_verified = True
        user.email_verification_token = None
        await self.db.flush()

        self.logger.info("email_verified", user_id=str(user.id))
        return user

    async def request_phone_otp(self, user: User, phone_number: str) -> Dict[str, Any]:
        """Store a fresh code for ``user`` and attach the phone number.

        The code is kept in Redis for PHONE_OTP_TTL_SECONDS. Delivery by SMS
        is not wired up; the code is logged at debug level only.
        """
        code = generate_otp()
        await self.cache.set(
            cache_key_for_phone_otp(str(user.id)),
            code,
            ttl=settings.PHONE_OTP_TTL_SECONDS,
        )

        user.phone_number = phone_number
        user.phone_verified = False
        await self.db.flush()

        self.logger.info("phone_otp_requested", user_id=str(user.id))
        self.logger.debug("phone_otp_issued", user_id=str(user.id), code=code)
        return {
            "message": "Verification code sent",
            "expires_in": settings.PHONE_OTP_TTL_SECONDS,
        }

    async def verify_phone_otp(self, user: User, code: str) -> User:
        """Check a submitted code and mark the phone verified.

        Raises:
            BadRequestError: no pending code, or the code does not match
        """
        key = cache_key_for_phone_otp(str(user.id))
        expected = await self.cache.get(key)
        if not expected or not secrets.compare_digest(expected, code):
            raise BadRequestError("Invalid or expired verification code")

        await self.cache.delete(key)
        user.phone_verified = True
        await self.db.flush()

        self.logger.info("phone_verified", user_id=str(user.id))
        return user

    async def get_user_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """Fetch user by ID."""
        stmt = select(User).where(User.id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
