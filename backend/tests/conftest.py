"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from spilt_tea.models import Base, Person, Post, User, UserRole


@pytest.fixture
def anyio_backend():
    """Use asyncio as the async backend for tests."""
    return "asyncio"


# ============================================================================
# DATABASE
# ============================================================================

@pytest_asyncio.fixture
async def test_db():
    """Create an in-memory SQLite database for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    SessionLocal = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with SessionLocal() as session:
        yield session

    await engine.dispose()


def make_user(username: str, role: str = UserRole.USER.value, **kwargs) -> User:
    return User(
        email=f"{username}@example.com",
        username=username,
        hashed_password="not-a-real-hash",
        role=role,
        email_verified=True,
        **kwargs,
    )


# ============================================================================
# USERS / PERSONS / POSTS
# ============================================================================

@pytest_asyncio.fixture
async def author(test_db: AsyncSession) -> User:
    user = make_user("author", first_name="Alice", last_name="Author")
    test_db.add(user)
    await test_db.commit()
    return user


@pytest_asyncio.fixture
async def other_user(test_db: AsyncSession) -> User:
    user = make_user("other", first_name="Oscar", last_name="Other")
    test_db.add(user)
    await test_db.commit()
    return user


@pytest_asyncio.fixture
async def admin_user(test_db: AsyncSession) -> User:
    user = make_user("admin", role=UserRole.ADMIN.value)
    test_db.add(user)
    await test_db.commit()
    return user


@pytest_asyncio.fixture
async def sample_person(test_db: AsyncSession, author: User) -> Person:
    person = Person(
        name="Jordan Smith",
        aliases=["JJ", "Jordy"],
        approximate_age=31,
        phone_number="(555) 123-4567",
        city="Austin",
        state="TX",
        country="US",
        created_by_id=author.id,
    )
    test_db.add(person)
    await test_db.commit()
    return person


@pytest_asyncio.fixture
async def sample_post(test_db: AsyncSession, author: User, sample_person: Person) -> Post:
    post = Post(
        author_id=author.id,
        person_id=sample_person.id,
        type="WARNING",
        title="Stood me up twice",
        content="Cancelled last minute, both times.",
    )
    test_db.add(post)
    await test_db.commit()
    return post


def days_ago(days: float) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=days)


# ============================================================================
# CACHE
# ============================================================================

def memory_cache() -> AsyncMock:
    """AsyncMock standing in for CacheService, backed by a dict."""
    store = {}
    cache = AsyncMock()
    cache.store = store

    async def _set(key, value, ttl=300):
        store[key] = value
        return True

    async def _get(key):
        return store.get(key)

    async def _delete(key):
        return store.pop(key, None) is not None

    cache.set.side_effect = _set
    cache.get.side_effect = _get
    cache.delete.side_effect = _delete
    cache.delete_pattern.return_value = 0
    cache.health_check.return_value = True
    return cache
