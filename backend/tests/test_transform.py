"""Tests for the pure response transforms: vote counting and phone masking."""

import copy
from types import SimpleNamespace

import pytest

from spilt_tea.utils.transform import (
    aggregate_votes,
    count_votes,
    mask_person,
    mask_person_phone,
    mask_phone,
    shape_post,
)


class TestAggregateVotes:
    """Tests for aggregate_votes / count_votes."""

    def test_counts_up_and_down(self):
        post = {
            "id": "p1",
            "title": "hello",
            "votes": [
                {"vote_type": "UPVOTE"},
                {"vote_type": "UPVOTE"},
                {"vote_type": "DOWNVOTE"},
            ],
        }

        result = aggregate_votes(post)

        assert result == {"id": "p1", "title": "hello", "upvotes": 2, "downvotes": 1}

    def test_input_is_not_mutated(self):
        post = {"id": "p1", "votes": [{"vote_type": "UPVOTE"}]}
        snapshot = copy.deepcopy(post)

        result = aggregate_votes(post)

        assert post == snapshot
        assert "votes" in post
        assert "votes" not in result

    def test_unknown_vote_types_are_ignored(self):
        votes = [
            {"vote_type": "UPVOTE"},
            {"vote_type": "upvote"},
            {"vote_type": "LIKE"},
            {"vote_type": None},
            {},
            {"vote_type": "DOWNVOTE"},
        ]

        upvotes, downvotes = count_votes(votes)

        assert (upvotes, downvotes) == (1, 1)
        ignored = len(votes) - upvotes - downvotes
        assert ignored == 4

    @pytest.mark.parametrize("votes", [[], None])
    def test_empty_or_missing_votes(self, votes):
        result = aggregate_votes({"id": "p1", "votes": votes})
        assert result["upvotes"] == 0
        assert result["downvotes"] == 0

    def test_missing_votes_key(self):
        assert aggregate_votes({"id": "p1"}) == {"id": "p1", "upvotes": 0, "downvotes": 0}

    def test_accepts_vote_objects(self):
        votes = [SimpleNamespace(vote_type="DOWNVOTE"), SimpleNamespace(vote_type="DOWNVOTE")]
        assert count_votes(votes) == (0, 2)


class TestMaskPhone:
    """Tests for mask_phone."""

    @pytest.mark.parametrize("phone", [None, ""])
    def test_empty_is_none(self, phone):
        assert mask_phone(phone) is None

    def test_five_digits_unchanged(self):
        assert mask_phone("12345") == "12345"

    def test_short_input_keeps_formatting(self):
        assert mask_phone("12-345") == "12-345"

    def test_six_digit_boundary(self):
        assert mask_phone("123456") == "**3456"

    def test_formatting_is_discarded(self):
        assert mask_phone("(555) 123-4567") == "******4567"

    def test_international_number(self):
        assert mask_phone("+1 555 123 4567") == "*******4567"


class TestMaskPerson:
    """Tests for masking a person nested inside another record."""

    def test_nested_person_masked_siblings_untouched(self):
        post = {
            "id": "p1",
            "title": "t",
            "person": {"name": "Jordan", "phone_number": "(555) 123-4567", "city": "Austin"},
        }

        result = mask_person_phone(post)

        assert result["person"] == {"name": "Jordan", "phone_number": "******4567", "city": "Austin"}
        assert result["title"] == "t"
        assert post["person"]["phone_number"] == "(555) 123-4567"

    def test_none_person_stays_none(self):
        assert mask_person_phone({"id": "p1", "person": None}) == {"id": "p1", "person": None}

    def test_person_without_phone(self):
        assert mask_person({"name": "x"}) == {"name": "x"}

    def test_shape_post_end_to_end(self):
        post = {
            "id": "p1",
            "votes": [{"vote_type": "UPVOTE"}, {"vote_type": "UPVOTE"}, {"vote_type": "DOWNVOTE"}],
            "person": {"phone_number": "123456"},
        }

        shaped = shape_post(post)

        assert shaped["upvotes"] == 2
        assert shaped["downvotes"] == 1
        assert shaped["person"]["phone_number"] == "**3456"
        assert "votes" not in shaped
