"""End-to-end tests through the FastAPI app with the database and cache swapped out."""

from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from spilt_tea.dependencies import get_db
from spilt_tea.main import app
from spilt_tea.models import Person, Post, User, VettingRequest
from spilt_tea.services import cache_service
from spilt_tea.services.auth_service import create_access_token

from conftest import memory_cache


@pytest.fixture
def cache(monkeypatch):
    fake = memory_cache()
    monkeypatch.setattr(cache_service, "_cache_instance", fake)
    return fake


@pytest_asyncio.fixture
async def client(test_db: AsyncSession, cache):
    async def _get_test_db():
        yield test_db
        await test_db.commit()

    app.dependency_overrides[get_db] = _get_test_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth_header(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


class TestErrors:

    async def test_not_found_envelope(self, client: AsyncClient):
        response = await client.get(f"/api/v1/posts/{uuid4()}")

        assert response.status_code == 404
        body = response.json()
        assert body["status"] == "error"
        assert body["error"]["code"] == "not_found"

    async def test_missing_token(self, client: AsyncClient):
        response = await client.post("/api/v1/posts", json={
            "type": "WARNING", "title": "t", "content": "c",
        })

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert response.json()["error"]["code"] == "unauthorized"

    async def test_garbage_token(self, client: AsyncClient, sample_post: Post):
        response = await client.post(
            f"/api/v1/posts/{sample_post.id}/vote",
            json={"vote_type": "UPVOTE"},
            headers={"Authorization": "Bearer nonsense"},
        )
        assert response.status_code == 401

    async def test_invalid_vote_type(self, client: AsyncClient, sample_post: Post, other_user: User):
        response = await client.post(
            f"/api/v1/posts/{sample_post.id}/vote",
            json={"vote_type": "SIDEWAYS"},
            headers=auth_header(other_user),
        )
        assert response.status_code == 422


class TestPostsAndVotes:

    async def test_vote_toggle_drops_trending_cache(
        self, client: AsyncClient, cache, sample_post: Post, other_user: User
    ):
        url = f"/api/v1/posts/{sample_post.id}/vote"

        first = await client.post(url, json={"vote_type": "UPVOTE"}, headers=auth_header(other_user))
        assert first.status_code == 200
        assert first.json()["data"] == {"vote_type": "UPVOTE", "message": "Vote created"}
        cache.delete_pattern.assert_awaited_with("trending:*")

        second = await client.post(url, json={"vote_type": "UPVOTE"}, headers=auth_header(other_user))
        assert second.json()["data"] == {"vote_type": None, "message": "Vote removed"}

        status = await client.get(url, headers=auth_header(other_user))
        assert status.json()["data"]["vote_type"] is None

    async def test_post_detail_masks_phone_and_counts_votes(
        self, client: AsyncClient, sample_post: Post, other_user: User
    ):
        await client.post(
            f"/api/v1/posts/{sample_post.id}/vote",
            json={"vote_type": "DOWNVOTE"},
            headers=auth_header(other_user),
        )

        response = await client.get(f"/api/v1/posts/{sample_post.id}")

        data = response.json()["data"]
        assert data["downvotes"] == 1
        assert data["upvotes"] == 0
        assert data["person"]["phone_number"] == "******4567"
        assert "votes" not in data

    async def test_list_posts_meta(self, client: AsyncClient, sample_post: Post):
        response = await client.get("/api/v1/posts", params={"page": 1, "limit": 5})

        body = response.json()
        assert body["meta"] == {"page": 1, "limit": 5, "total": 1, "total_pages": 1}
        assert body["data"][0]["title"] == "Stood me up twice"

    async def test_update_by_non_author_forbidden(
        self, client: AsyncClient, sample_post: Post, other_user: User
    ):
        response = await client.patch(
            f"/api/v1/posts/{sample_post.id}",
            json={"title": "mine now"},
            headers=auth_header(other_user),
        )
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "forbidden"

    async def test_update_cannot_null_required_field(
        self, client: AsyncClient, sample_post: Post, author: User
    ):
        response = await client.patch(
            f"/api/v1/posts/{sample_post.id}",
            json={"title": None},
            headers=auth_header(author),
        )
        assert response.status_code == 422

        detail = await client.get(f"/api/v1/posts/{sample_post.id}")
        assert detail.json()["data"]["title"] == "Stood me up twice"

    async def test_trending_dropped_after_commit(
        self, client: AsyncClient, cache, test_db: AsyncSession, sample_post: Post, other_user: User
    ):
        seen = []

        async def record_transaction(pattern):
            seen.append(test_db.in_transaction())
            return 0

        cache.delete_pattern.side_effect = record_transaction

        response = await client.post(
            f"/api/v1/posts/{sample_post.id}/vote",
            json={"vote_type": "UPVOTE"},
            headers=auth_header(other_user),
        )
        assert response.status_code == 200
        assert seen == [False]


class TestPersonsAndTrending:

    async def test_update_cannot_null_required_field(
        self, client: AsyncClient, sample_person: Person, author: User, admin_user: User
    ):
        url = f"/api/v1/persons/{sample_person.id}"

        by_creator = await client.patch(url, json={"name": None}, headers=auth_header(author))
        assert by_creator.status_code == 422

        by_admin = await client.patch(url, json={"is_verified": None}, headers=auth_header(admin_user))
        assert by_admin.status_code == 422

        detail = await client.get(url)
        assert detail.json()["data"]["name"] == "Jordan Smith"
        assert detail.json()["data"]["is_verified"] is False

    async def test_person_detail_is_masked(self, client: AsyncClient, sample_person: Person):
        response = await client.get(f"/api/v1/persons/{sample_person.id}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["phone_number"] == "******4567"
        assert data["created_by"]["username"] == "author"

    async def test_trending_is_cached(self, client: AsyncClient, cache, sample_post: Post):
        first = await client.get("/api/v1/search/trending", params={"limit": 5})
        assert first.status_code == 200
        assert "trending:l5" in cache.store

        second = await client.get("/api/v1/search/trending", params={"limit": 5})
        assert second.json() == first.json()
        assert cache.set.await_count == 1

        item = first.json()["data"][0]
        assert item["title"] == "Stood me up twice"
        assert item["person"]["phone_number"] == "******4567"
        assert item["trending_score"] >= 50


class TestVettingModeration:

    async def test_status_change_requires_moderator(
        self, client: AsyncClient, test_db: AsyncSession, author: User, admin_user: User
    ):
        request = VettingRequest(author_id=author.id, target_name="Riley")
        test_db.add(request)
        await test_db.commit()
        url = f"/api/v1/vetting/{request.id}/status"

        denied = await client.patch(url, json={"status": "APPROVED"}, headers=auth_header(author))
        assert denied.status_code == 403

        allowed = await client.patch(url, json={"status": "APPROVED"}, headers=auth_header(admin_user))
        assert allowed.status_code == 200
        assert allowed.json()["data"]["status"] == "APPROVED"
