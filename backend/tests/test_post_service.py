"""Tests for PostService."""

from uuid import uuid4

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from spilt_tea.core.exceptions import ForbiddenError, NotFoundError
from spilt_tea.models import Comment, Person, Post, User, Vote
from spilt_tea.services.post_service import PostService, paginate


def _payload(**overrides):
    payload = {
        "type": "EXPERIENCE",
        "title": "Great first date",
        "content": "Polite and on time.",
    }
    payload.update(overrides)
    return payload


class TestPaginate:

    def test_page_math(self):
        assert paginate(45, 20, 20) == {"total": 45, "page": 2, "total_pages": 3}
        assert paginate(0, 0, 20) == {"total": 0, "page": 1, "total_pages": 0}


class TestPostService:

    async def test_create_returns_shaped_post(
        self, test_db: AsyncSession, author: User, sample_person: Person
    ):
        service = PostService(test_db)

        post = await service.create(author.id, _payload(person_id=sample_person.id))

        assert post["title"] == "Great first date"
        assert post["upvotes"] == 0
        assert post["downvotes"] == 0
        assert post["comment_count"] == 0
        assert "votes" not in post
        assert post["author"]["username"] == "author"
        assert post["person"]["phone_number"] == "******4567"

    async def test_create_with_unknown_person(self, test_db: AsyncSession, author: User):
        service = PostService(test_db)
        with pytest.raises(NotFoundError):
            await service.create(author.id, _payload(person_id=uuid4()))

    async def test_find_all_paginates_published_newest_first(
        self, test_db: AsyncSession, author: User
    ):
        service = PostService(test_db)
        for i in range(5):
            await service.create(author.id, _payload(title=f"post {i}"))
        await service.create(author.id, _payload(title="draft", is_published=False))
        await test_db.commit()

        listing = await service.find_all(skip=0, take=2)

        assert listing["total"] == 5
        assert listing["page"] == 1
        assert listing["total_pages"] == 3
        assert len(listing["posts"]) == 2
        assert all(p["title"] != "draft" for p in listing["posts"])

    async def test_find_all_filters_by_type_and_author(
        self, test_db: AsyncSession, author: User, other_user: User
    ):
        service = PostService(test_db)
        await service.create(author.id, _payload(type="WARNING"))
        await service.create(author.id, _payload(type="EXPERIENCE"))
        await service.create(other_user.id, _payload(type="WARNING"))
        await test_db.commit()

        warnings = await service.find_all(post_type="WARNING")
        assert warnings["total"] == 2

        mine = await service.find_all(post_type="WARNING", author_id=author.id)
        assert mine["total"] == 1

    async def test_find_one_counts_votes_and_comments(
        self, test_db: AsyncSession, sample_post: Post, author: User, other_user: User
    ):
        test_db.add_all([
            Vote(user_id=author.id, post_id=sample_post.id, vote_type="UPVOTE"),
            Vote(user_id=other_user.id, post_id=sample_post.id, vote_type="DOWNVOTE"),
            Comment(post_id=sample_post.id, user_id=other_user.id, content="yikes"),
            Comment(post_id=sample_post.id, user_id=author.id, content="gone", is_deleted=True),
        ])
        await test_db.commit()

        post = await PostService(test_db).find_one(sample_post.id)

        assert post["upvotes"] == 1
        assert post["downvotes"] == 1
        assert post["comment_count"] == 1

    async def test_find_one_increments_view_count_once(
        self, test_db: AsyncSession, sample_post: Post
    ):
        service = PostService(test_db)

        first = await service.find_one(sample_post.id)
        second = await service.find_one(sample_post.id)

        assert first["view_count"] == 1
        assert second["view_count"] == 2
        stored = await test_db.execute(select(Post.view_count).where(Post.id == sample_post.id))
        assert stored.scalar() == 2

    async def test_find_one_not_found(self, test_db: AsyncSession):
        with pytest.raises(NotFoundError):
            await PostService(test_db).find_one(uuid4())

    async def test_update_by_author(self, test_db: AsyncSession, sample_post: Post, author: User):
        post = await PostService(test_db).update(sample_post.id, author.id, {"title": "Updated"})
        assert post["title"] == "Updated"
        assert post["content"] == "Cancelled last minute, both times."

    async def test_update_by_other_user_forbidden(
        self, test_db: AsyncSession, sample_post: Post, other_user: User
    ):
        with pytest.raises(ForbiddenError):
            await PostService(test_db).update(sample_post.id, other_user.id, {"title": "Hijack"})

    async def test_not_found_takes_precedence_over_forbidden(
        self, test_db: AsyncSession, other_user: User
    ):
        with pytest.raises(NotFoundError):
            await PostService(test_db).remove(uuid4(), other_user.id)

    async def test_remove(
        self, test_db: AsyncSession, sample_post: Post, author: User, other_user: User
    ):
        service = PostService(test_db)

        with pytest.raises(ForbiddenError):
            await service.remove(sample_post.id, other_user.id)

        result = await service.remove(sample_post.id, author.id)
        assert result == {"message": "Post deleted successfully"}

        with pytest.raises(NotFoundError):
            await service.find_one(sample_post.id)
