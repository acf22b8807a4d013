"""Vetting request service.

A vetting request asks the community about someone before meeting them. It
may point at a registered user and at a post; moderators move it from
PENDING to APPROVED or REJECTED.
"""

import uuid
from typing import Any, Dict, Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from spilt_tea.core.exceptions import NotFoundError
from spilt_tea.models.enums import VettingStatus
from spilt_tea.models.vetting_request import VettingRequest
from spilt_tea.services.filters import CONTAINS, EXACT, FilterSpec, apply_filter, build_filter
from spilt_tea.services.post_service import paginate

logger = structlog.get_logger(__name__)


def vetting_query():
    return select(VettingRequest).options(
        selectinload(VettingRequest.author),
        selectinload(VettingRequest.target_user),
    )


class VettingService:
    """Handles creation, listing and moderation of vetting requests."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logger.bind(service="vetting_service")

    async def create(self, author_id: uuid.UUID, payload: Dict[str, Any]) -> VettingRequest:
        request = VettingRequest(author_id=author_id, **payload)
        self.db.add(request)
        await self.db.flush()

        self.logger.info("vetting_request_created", request_id=str(request.id), author_id=str(author_id))
        return await self.find_one(request.id)

    async def find_all(
        self,
        skip: int = 0,
        take: int = 20,
        status: Optional[str] = None,
        author_id: Optional[uuid.UUID] = None,
        target_user_id: Optional[uuid.UUID] = None,
    ) -> Dict[str, Any]:
        """List vetting requests, newest first.

        Returns:
            dict with ``requests``, ``total``, ``page`` and ``total_pages``
        """
        clause = build_filter(VettingRequest, [
            FilterSpec("status", status, EXACT),
            FilterSpec("author_id", author_id, EXACT),
            FilterSpec("target_user_id", target_user_id, EXACT),
        ])

        stmt = (
            apply_filter(vetting_query(), clause)
            .order_by(VettingRequest.created_at.desc())
            .offset(skip)
            .limit(take)
        )
        requests = (await self.db.execute(stmt)).scalars().all()
        total = (await self.db.execute(
            apply_filter(select(func.count(VettingRequest.id)), clause)
        )).scalar() or 0

        return {"requests": list(requests), **paginate(total, skip, take)}

    async def find_one(self, request_id: uuid.UUID) -> VettingRequest:
        result = await self.db.execute(
            vetting_query()
            .where(VettingRequest.id == request_id)
            .execution_options(populate_existing=True)
        )
        request = result.scalar_one_or_none()
        if not request:
            raise NotFoundError("VettingRequest", str(request_id))
        return request

    async def update_status(self, request_id: uuid.UUID, status: VettingStatus) -> VettingRequest:
        """Set a request's moderation status.

        Raises:
            NotFoundError: request does not exist
        """
        request = await self.find_one(request_id)
        request.status = VettingStatus(status).value
        await self.db.flush()

        self.logger.info("vetting_status_updated", request_id=str(request_id), status=request.status)
        return await self.find_one(request_id)

    async def search_by_name(self, name: str, skip: int = 0, take: int = 20) -> Dict[str, Any]:
        """Case-insensitive substring match on the target's name."""
        clause = build_filter(VettingRequest, [FilterSpec("target_name", name, CONTAINS)])

        stmt = (
            apply_filter(vetting_query(), clause)
            .order_by(VettingRequest.created_at.desc())
            .offset(skip)
            .limit(take)
        )
        requests = (await self.db.execute(stmt)).scalars().all()
        total = (await self.db.execute(
            apply_filter(select(func.count(VettingRequest.id)), clause)
        )).scalar() or 0

        return {"requests": list(requests), **paginate(total, skip, take)}
