"""Tests for ownership and role checks."""

from uuid import uuid4

import pytest

from spilt_tea.core.exceptions import ForbiddenError
from spilt_tea.services.permissions import (
    can_delete_person,
    can_mutate_post,
    can_update_person,
    ensure_can_delete_person,
    ensure_can_mutate_post,
    ensure_can_update_person,
    sanitize_person_update,
)


class TestPostPermissions:

    def test_author_may_mutate(self):
        assert can_mutate_post({"author_id": "u1"}, "u1") is True

    def test_other_user_may_not(self):
        assert can_mutate_post({"author_id": "u1"}, "u2") is False

    def test_uuid_and_string_ids_compare_equal(self):
        user_id = uuid4()
        assert can_mutate_post({"author_id": user_id}, str(user_id)) is True

    def test_ensure_raises_with_action(self):
        with pytest.raises(ForbiddenError, match="delete your own posts"):
            ensure_can_mutate_post({"author_id": "u1"}, "u2", action="delete")


class TestPersonPermissions:

    person = {"created_by_id": "u1"}

    def test_update_rules(self):
        assert can_update_person(self.person, "u2", "USER") is False
        assert can_update_person(self.person, "u1", "USER") is True
        assert can_update_person(self.person, "u2", "ADMIN") is True

    def test_moderator_is_not_admin(self):
        assert can_update_person(self.person, "u2", "MODERATOR") is False

    def test_person_without_creator(self):
        assert can_update_person({"created_by_id": None}, "u1", "USER") is False

    def test_delete_is_admin_only(self):
        assert can_delete_person("USER") is False
        assert can_delete_person("MODERATOR") is False
        assert can_delete_person("ADMIN") is True

    def test_ensure_wrappers(self):
        with pytest.raises(ForbiddenError):
            ensure_can_update_person(self.person, "u2", "USER")
        with pytest.raises(ForbiddenError, match="Only admins"):
            ensure_can_delete_person("USER")
        ensure_can_update_person(self.person, "u1", "USER")
        ensure_can_delete_person("ADMIN")


class TestSanitizePersonUpdate:

    def test_non_admin_is_verified_dropped(self):
        payload = {"name": "New", "is_verified": True}

        result = sanitize_person_update(payload, "USER")

        assert result == {"name": "New"}
        assert payload == {"name": "New", "is_verified": True}

    def test_admin_keeps_is_verified(self):
        payload = {"is_verified": True}
        result = sanitize_person_update(payload, "ADMIN")
        assert result == {"is_verified": True}
        assert result is not payload
