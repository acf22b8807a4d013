"""Common Pydantic schemas used across the API."""

from typing import Any, Dict, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Pagination metadata included in list responses."""

    page: int = 1
    limit: int = 20
    total: int = 0
    total_pages: int = 0

    @classmethod
    def from_listing(cls, listing: Dict[str, Any], limit: int) -> "PaginationMeta":
        """Build from a service listing dict carrying total/page/total_pages."""
        return cls(
            page=listing["page"],
            limit=limit,
            total=listing["total"],
            total_pages=listing["total_pages"],
        )


class ApiResponse(BaseModel, Generic[T]):
    """Standard API response envelope."""

    status: str = "success"
    data: T
    meta: PaginationMeta | None = None


class MessageResponse(BaseModel):
    message: str


class ErrorDetail(BaseModel):
    """Error detail for error responses."""

    code: str
    message: str
    field: str | None = None


class ErrorResponse(BaseModel):
    """Standard API error response."""

    status: str = "error"
    error: ErrorDetail


def reject_null(value: Any) -> Any:
    """Field validator body for PATCH fields that may be omitted but not cleared."""
    if value is None:
        raise ValueError("must not be null")
    return value
