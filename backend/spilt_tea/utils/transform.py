"""Response-shaping transforms shared by every read path.

Everything here is pure: inputs are never mutated and a fresh mapping is
returned. ORM objects are flattened into plain dicts first (``post_to_dict``,
``person_to_dict``) so the same transforms apply to posts, persons and search
results alike.
"""

import re
from typing import Any, Dict, Iterable, Mapping, Optional

from spilt_tea.models.enums import VoteType

_NON_DIGITS = re.compile(r"[^0-9]")

# Numbers with fewer digits than this are returned unchanged.
MIN_MASKABLE_DIGITS = 6
VISIBLE_DIGITS = 4


def _vote_type_of(vote: Any) -> Optional[str]:
    if isinstance(vote, Mapping):
        return vote.get("vote_type")
    return getattr(vote, "vote_type", None)


def count_votes(votes: Optional[Iterable[Any]]) -> tuple[int, int]:
    """Count (upvotes, downvotes); any other vote_type value is ignored."""
    upvotes = 0
    downvotes = 0
    for vote in votes or ():
        vote_type = _vote_type_of(vote)
        if vote_type == VoteType.UPVOTE.value:
            upvotes += 1
        elif vote_type == VoteType.DOWNVOTE.value:
            downvotes += 1
    return upvotes, downvotes


def aggregate_votes(entity: Mapping[str, Any]) -> Dict[str, Any]:
    """Replace an entity's ``votes`` collection with upvote/downvote counts.

    Args:
        entity: Any mapping carrying a ``votes`` collection of vote records
            (dicts or objects exposing ``vote_type``). A missing collection
            counts as empty.

    Returns:
        New dict with every original key except ``votes``, plus ``upvotes``
        and ``downvotes``.
    """
    upvotes, downvotes = count_votes(entity.get("votes"))
    result = {key: value for key, value in entity.items() if key != "votes"}
    result["upvotes"] = upvotes
    result["downvotes"] = downvotes
    return result


def mask_phone(phone: Optional[str]) -> Optional[str]:
    """Redact all but the last four digits of a phone number.

    ``None`` and ``""`` become ``None``. Inputs with fewer than six digits are
    returned unchanged. Otherwise formatting is discarded and the result is
    one ``*`` per hidden digit followed by the last four digits, so
    ``"(555) 123-4567"`` becomes ``"******4567"``.
    """
    if not phone:
        return None

    digits = _NON_DIGITS.sub("", phone)
    if len(digits) < MIN_MASKABLE_DIGITS:
        return phone

    return "*" * (len(digits) - VISIBLE_DIGITS) + digits[-VISIBLE_DIGITS:]


def mask_person(person: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    """Copy of a person mapping with ``phone_number`` masked."""
    if person is None:
        return None
    result = dict(person)
    if "phone_number" in result:
        result["phone_number"] = mask_phone(result["phone_number"])
    return result


def mask_person_phone(entity: Mapping[str, Any], key: str = "person") -> Dict[str, Any]:
    """Copy of ``entity`` with the phone number of its nested person masked.

    Sibling fields are left untouched and a ``None`` nested person stays
    ``None``.
    """
    result = dict(entity)
    if key in result:
        result[key] = mask_person(result[key])
    return result


def shape_post(post: Mapping[str, Any]) -> Dict[str, Any]:
    """Full read-path shaping for a flattened post: counts + phone masking."""
    return mask_person_phone(aggregate_votes(post))


# ---------------------------------------------------------------------------
# ORM flattening
# ---------------------------------------------------------------------------

def user_brief(user: Any) -> Optional[Dict[str, Any]]:
    """Public subset of a user embedded in other responses."""
    if user is None:
        return None
    return {
        "id": user.id,
        "username": user.username,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "profile_image_url": user.profile_image_url,
    }


def person_to_dict(person: Any, post_count: Optional[int] = None) -> Optional[Dict[str, Any]]:
    """Flatten a Person row. The phone number is left raw; callers mask it."""
    if person is None:
        return None
    data = {
        "id": person.id,
        "name": person.name,
        "aliases": list(person.aliases or []),
        "approximate_age": person.approximate_age,
        "gender": person.gender,
        "phone_number": person.phone_number,
        "city": person.city,
        "state": person.state,
        "country": person.country,
        "profile_image_url": person.profile_image_url,
        "is_verified": person.is_verified,
        "created_by_id": person.created_by_id,
        "created_at": person.created_at,
    }
    if post_count is not None:
        data["post_count"] = post_count
    return data


def post_to_dict(post: Any, comment_count: int = 0) -> Dict[str, Any]:
    """Flatten a Post row with eagerly loaded author, person and votes."""
    return {
        "id": post.id,
        "author_id": post.author_id,
        "person_id": post.person_id,
        "type": post.type,
        "title": post.title,
        "content": post.content,
        "person_name": post.person_name,
        "person_age": post.person_age,
        "person_gender": post.person_gender,
        "person_location": post.person_location,
        "evidence_urls": list(post.evidence_urls or []),
        "is_anonymous": post.is_anonymous,
        "is_published": post.is_published,
        "view_count": post.view_count or 0,
        "created_at": post.created_at,
        "updated_at": post.updated_at,
        "author": user_brief(post.author),
        "person": person_to_dict(post.person),
        "votes": [{"vote_type": v.vote_type} for v in post.votes],
        "comment_count": comment_count,
    }
