"""Vote service: per-user up/down votes on posts.

Each (user, post) pair is in one of three states. A request for a vote type
is resolved through ``TRANSITIONS`` into a single create, update or delete of
that pair's vote row:

    NO_VOTE   + X         -> create X      "Vote created"
    X-VOTED   + X         -> delete        "Vote removed"
    X-VOTED   + opposite  -> update to Y   "Vote updated"
"""

import enum
import uuid
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from spilt_tea.core.exceptions import ConflictError, NotFoundError
from spilt_tea.models.enums import VoteType
from spilt_tea.models.post import Post
from spilt_tea.models.vote import Vote

logger = structlog.get_logger(__name__)


class VoteState(str, enum.Enum):
    NO_VOTE = "NO_VOTE"
    UPVOTED = "UPVOTED"
    DOWNVOTED = "DOWNVOTED"


class VoteAction(str, enum.Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class Transition:
    action: VoteAction
    next_state: VoteState
    message: str


_STATE_FOR_TYPE = {
    VoteType.UPVOTE: VoteState.UPVOTED,
    VoteType.DOWNVOTE: VoteState.DOWNVOTED,
}
_TYPE_FOR_STATE = {state: vote_type for vote_type, state in _STATE_FOR_TYPE.items()}

TRANSITIONS: Dict[Tuple[VoteState, VoteType], Transition] = {
    (VoteState.NO_VOTE, VoteType.UPVOTE): Transition(VoteAction.CREATE, VoteState.UPVOTED, "Vote created"),
    (VoteState.NO_VOTE, VoteType.DOWNVOTE): Transition(VoteAction.CREATE, VoteState.DOWNVOTED, "Vote created"),
    (VoteState.UPVOTED, VoteType.UPVOTE): Transition(VoteAction.DELETE, VoteState.NO_VOTE, "Vote removed"),
    (VoteState.UPVOTED, VoteType.DOWNVOTE): Transition(VoteAction.UPDATE, VoteState.DOWNVOTED, "Vote updated"),
    (VoteState.DOWNVOTED, VoteType.DOWNVOTE): Transition(VoteAction.DELETE, VoteState.NO_VOTE, "Vote removed"),
    (VoteState.DOWNVOTED, VoteType.UPVOTE): Transition(VoteAction.UPDATE, VoteState.UPVOTED, "Vote updated"),
}


def state_of(vote: Optional[Vote]) -> VoteState:
    """Current state for a pair given its vote row (or None)."""
    if vote is None:
        return VoteState.NO_VOTE
    return _STATE_FOR_TYPE[VoteType(vote.vote_type)]


def resolve_transition(state: VoteState, requested: VoteType) -> Transition:
    return TRANSITIONS[(state, VoteType(requested))]


def vote_type_for(state: VoteState) -> Optional[VoteType]:
    return _TYPE_FOR_STATE.get(state)


class VoteService:
    """Handles post voting with per-user tracking."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logger.bind(service="vote_service")

    async def _get_vote(self, post_id: uuid.UUID, user_id: uuid.UUID) -> Optional[Vote]:
        stmt = select(Vote).where(
            Vote.user_id == user_id,
            Vote.post_id == post_id,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def toggle_vote(
        self,
        post_id: uuid.UUID,
        user_id: uuid.UUID,
        vote_type: VoteType,
    ) -> Dict[str, Optional[str]]:
        """Cast, switch or withdraw a vote on a post.

        Voting the same way twice removes the vote; voting the other way
        switches it.

        Returns:
            dict with ``vote_type`` (the new vote, or None) and ``message``

        Raises:
            NotFoundError: post does not exist (no vote lookup is attempted)
            ConflictError: a concurrent request created the pair's vote first
        """
        vote_type = VoteType(vote_type)

        # Get post first (ensures it exists)
        post_result = await self.db.execute(select(Post.id).where(Post.id == post_id))
        if post_result.scalar_one_or_none() is None:
            raise NotFoundError("Post", str(post_id))

        existing = await self._get_vote(post_id, user_id)
        transition = resolve_transition(state_of(existing), vote_type)

        if transition.action is VoteAction.CREATE:
            self.db.add(Vote(user_id=user_id, post_id=post_id, vote_type=vote_type.value))
        elif transition.action is VoteAction.UPDATE:
            existing.vote_type = vote_type.value
        else:
            await self.db.delete(existing)

        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            self.logger.warning(
                "vote_conflict",
                post_id=str(post_id),
                user_id=str(user_id),
            )
            raise ConflictError("A vote for this post was recorded concurrently; retry the request")

        new_type = vote_type_for(transition.next_state)
        self.logger.info(
            "vote_" + transition.action.value + "d",
            post_id=str(post_id),
            user_id=str(user_id),
            vote_type=new_type.value if new_type else None,
        )

        return {
            "vote_type": new_type.value if new_type else None,
            "message": transition.message,
        }

    async def get_user_vote(
        self,
        post_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> Dict[str, Optional[str]]:
        """Report the user's current vote on a post without changing it."""
        existing = await self._get_vote(post_id, user_id)
        return {"vote_type": existing.vote_type if existing else None}
