"""FastAPI dependency injection providers."""

import uuid
from typing import AsyncGenerator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from spilt_tea.core.exceptions import ForbiddenError, UnauthorizedError
from spilt_tea.db.session import async_session_factory
from spilt_tea.models.enums import UserRole
from spilt_tea.models.user import User
from spilt_tea.services.auth_service import AuthService, decode_access_token

_bearer_scheme = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session for request-scoped usage.

    The session is automatically committed on success or rolled back on error.
    Always closed after the request completes.

    Usage:
        @router.get("/posts")
        async def list_posts(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def _user_from_credentials(
    credentials: Optional[HTTPAuthorizationCredentials],
    db: AsyncSession,
) -> Optional[User]:
    """Resolve a bearer token to an active, non-banned user, or None."""
    if not credentials:
        return None

    claims = decode_access_token(credentials.credentials)
    if not claims or not claims.get("sub"):
        return None

    try:
        user_id = uuid.UUID(claims["sub"])
    except ValueError:
        return None

    user = await AuthService(db).get_user_by_id(user_id)
    if not user or not user.is_active or user.is_banned:
        return None
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Extract and validate JWT token, return the authenticated user.

    Raises 401 if token is missing/invalid or user not found.
    """
    if not credentials:
        raise UnauthorizedError("Authentication required")

    user = await _user_from_credentials(credentials, db)
    if not user:
        raise UnauthorizedError("Invalid or expired token")
    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """Like get_current_user but returns None instead of raising 401."""
    return await _user_from_credentials(credentials, db)


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != UserRole.ADMIN.value:
        raise ForbiddenError("Admin access required")
    return current_user


async def require_moderator(current_user: User = Depends(get_current_user)) -> User:
    """Admins and moderators."""
    if current_user.role not in (UserRole.ADMIN.value, UserRole.MODERATOR.value):
        raise ForbiddenError("Moderator access required")
    return current_user
