"""Tests for trending score computation."""

from datetime import datetime, timedelta, timezone

import pytest

from spilt_tea.services.trending import (
    RECENCY_BONUS_MAX,
    age_in_days,
    compute_trending,
    recency_bonus,
    trending_score,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def candidate(post_id, votes=(), comment_count=0, view_count=0, age_days=0, person=None):
    return {
        "id": post_id,
        "title": f"post {post_id}",
        "votes": [{"vote_type": v} for v in votes],
        "comment_count": comment_count,
        "view_count": view_count,
        "created_at": NOW - timedelta(days=age_days),
        "person": person,
    }


class TestRecencyBonus:

    def test_starts_at_max(self):
        assert recency_bonus(0) == RECENCY_BONUS_MAX

    def test_non_increasing_and_floors_at_zero(self):
        bonuses = [recency_bonus(d) for d in range(0, 30)]
        assert all(a >= b for a, b in zip(bonuses, bonuses[1:]))
        assert recency_bonus(7) == 1
        assert recency_bonus(8) == 0
        assert all(b == 0 for b in bonuses[8:])

    def test_today_beats_ten_days_ago(self):
        assert recency_bonus(0) == 50
        assert recency_bonus(10) == 0


class TestAgeInDays:

    def test_floors_partial_days(self):
        assert age_in_days(NOW - timedelta(days=2, hours=23), NOW) == 2

    def test_future_timestamp_is_zero(self):
        assert age_in_days(NOW + timedelta(hours=5), NOW) == 0

    def test_naive_datetime_is_utc(self):
        naive = (NOW - timedelta(days=3)).replace(tzinfo=None)
        assert age_in_days(naive, NOW) == 3


class TestComputeTrending:

    def test_end_to_end_score(self):
        post = candidate("p", votes=["UPVOTE", "UPVOTE", "DOWNVOTE"], comment_count=5, view_count=100)

        [result] = compute_trending([post], limit=10, now=NOW)

        assert result["upvotes"] == 2
        assert result["downvotes"] == 1
        assert result["comment_count"] == 5
        assert result["trending_score"] == pytest.approx(77)
        assert "votes" not in result

    def test_score_formula(self):
        assert trending_score(3, 1, 2, 10, 1) == pytest.approx(4 + 6 + 1 + 43)

    def test_sorted_descending_and_truncated(self):
        posts = [
            candidate("old", votes=["UPVOTE"] * 3, age_days=20),
            candidate("fresh", age_days=0),
            candidate("busy", comment_count=10, age_days=9),
        ]

        result = compute_trending(posts, limit=2, now=NOW)

        assert [p["id"] for p in result] == ["fresh", "busy"]

    def test_ties_keep_candidate_order(self):
        posts = [candidate("a"), candidate("b"), candidate("c")]
        result = compute_trending(posts, limit=3, now=NOW)
        assert [p["id"] for p in result] == ["a", "b", "c"]

    def test_missing_view_count_counts_as_zero(self):
        post = candidate("p")
        post["view_count"] = None
        [result] = compute_trending([post], limit=1, now=NOW)
        assert result["trending_score"] == pytest.approx(50)

    def test_person_phone_masked(self):
        post = candidate("p", person={"name": "J", "phone_number": "555-123-4567"})
        [result] = compute_trending([post], limit=1, now=NOW)
        assert result["person"]["phone_number"] == "******4567"

    def test_empty_candidates(self):
        assert compute_trending([], limit=10, now=NOW) == []

    def test_input_not_mutated(self):
        post = candidate("p", votes=["UPVOTE"])
        compute_trending([post], limit=1, now=NOW)
        assert post["votes"] == [{"vote_type": "UPVOTE"}]
        assert "trending_score" not in post
