"""Trending score computation for the posts feed.

score = (upvotes - downvotes) * VOTE_WEIGHT
        + comment_count * COMMENT_WEIGHT
        + view_count * VIEW_WEIGHT
        + max(0, RECENCY_BONUS_MAX - age_in_days * RECENCY_DECAY_PER_DAY)

The weights define observable ranking behavior; tune them here only.
Candidate selection (published, recent, capped) happens in SearchService.
"""

import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

from spilt_tea.utils.transform import count_votes, mask_person_phone

VOTE_WEIGHT = 2
COMMENT_WEIGHT = 3
VIEW_WEIGHT = 0.1
RECENCY_BONUS_MAX = 50
RECENCY_DECAY_PER_DAY = 7

SECONDS_PER_DAY = 86400


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def age_in_days(created_at: datetime, now: Optional[datetime] = None) -> int:
    """Whole days elapsed since ``created_at``, never negative."""
    now = _as_utc(now or datetime.now(timezone.utc))
    elapsed = (now - _as_utc(created_at)).total_seconds()
    return max(0, math.floor(elapsed / SECONDS_PER_DAY))


def recency_bonus(days: int) -> float:
    """Linear decay from RECENCY_BONUS_MAX, reaching 0 on day 8 and staying there."""
    return max(0, RECENCY_BONUS_MAX - days * RECENCY_DECAY_PER_DAY)


def trending_score(
    upvotes: int,
    downvotes: int,
    comment_count: int,
    view_count: int,
    days: int,
) -> float:
    return (
        (upvotes - downvotes) * VOTE_WEIGHT
        + comment_count * COMMENT_WEIGHT
        + view_count * VIEW_WEIGHT
        + recency_bonus(days)
    )


def score_post(post: Mapping[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """Shape one flattened post and attach its trending score.

    Args:
        post: Mapping from ``post_to_dict`` (needs votes, comment_count,
            view_count, created_at).
        now: Reference time, defaults to the current UTC time.

    Returns:
        Post fields without ``votes``, with upvotes/downvotes/comment_count,
        trending_score and a masked person phone number.
    """
    upvotes, downvotes = count_votes(post.get("votes"))
    comment_count = post.get("comment_count") or 0
    view_count = post.get("view_count") or 0
    days = age_in_days(post["created_at"], now)

    shaped = {key: value for key, value in post.items() if key != "votes"}
    shaped["upvotes"] = upvotes
    shaped["downvotes"] = downvotes
    shaped["comment_count"] = comment_count
    shaped["trending_score"] = trending_score(upvotes, downvotes, comment_count, view_count, days)
    return mask_person_phone(shaped)


def compute_trending(
    candidates: Sequence[Mapping[str, Any]],
    limit: int,
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """Rank candidate posts by trending score (descending) and keep ``limit``.

    The sort is stable, so ties keep candidate order. ``now`` is resolved
    once so every candidate is aged against the same instant.
    """
    now = now or datetime.now(timezone.utc)
    scored = [score_post(post, now) for post in candidates]
    scored.sort(key=lambda p: p["trending_score"], reverse=True)
    return scored[:limit]
