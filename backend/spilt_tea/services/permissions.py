"""Ownership and role checks for post and person mutations.

The predicates are side-effect free. The ``ensure_*`` wrappers raise
ForbiddenError and assume the caller already confirmed the target exists.
"""

import uuid
from typing import Any, Dict, Mapping, Union

from spilt_tea.core.exceptions import ForbiddenError
from spilt_tea.models.enums import UserRole

# Fields only an admin may write on a person
ADMIN_ONLY_PERSON_FIELDS = ("is_verified",)

Identifier = Union[uuid.UUID, str]


def _get(entity: Any, field: str) -> Any:
    if isinstance(entity, Mapping):
        return entity.get(field)
    return getattr(entity, field, None)


def _same_id(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return False
    return str(left) == str(right)


def can_mutate_post(post: Any, user_id: Identifier) -> bool:
    """Only the author may update or delete a post."""
    return _same_id(_get(post, "author_id"), user_id)


def can_update_person(person: Any, user_id: Identifier, role: str) -> bool:
    """Admins may update any person; other users only those they created."""
    return role == UserRole.ADMIN or _same_id(_get(person, "created_by_id"), user_id)


def can_delete_person(role: str) -> bool:
    """Deleting a person is admin-only, regardless of who created it."""
    return role == UserRole.ADMIN


def sanitize_person_update(payload: Mapping[str, Any], role: str) -> Dict[str, Any]:
    """Return a copy of ``payload`` without fields the role may not set.

    Non-admin values for privileged fields are dropped silently rather than
    rejected.
    """
    if role == UserRole.ADMIN:
        return dict(payload)
    return {k: v for k, v in payload.items() if k not in ADMIN_ONLY_PERSON_FIELDS}


def ensure_can_mutate_post(post: Any, user_id: Identifier, action: str = "update") -> None:
    if not can_mutate_post(post, user_id):
        raise ForbiddenError(f"You can only {action} your own posts")


def ensure_can_update_person(person: Any, user_id: Identifier, role: str) -> None:
    if not can_update_person(person, user_id, role):
        raise ForbiddenError("You do not have permission to update this person")


def ensure_can_delete_person(role: str) -> None:
    if not can_delete_person(role):
        raise ForbiddenError("Only admins can delete persons")
