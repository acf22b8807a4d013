"""Custom exception classes for the application."""


class SpiltTeaException(Exception):
    """Base exception for all Spilt Tea errors."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)


class NotFoundError(SpiltTeaException):
    """Raised when a requested resource is not found."""

    status_code = 404
    code = "not_found"

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        super().__init__(f"{resource} with identifier '{identifier}' not found")


class ForbiddenError(SpiltTeaException):
    """Raised when the caller is not allowed to perform an action."""

    status_code = 403
    code = "forbidden"


class ConflictError(SpiltTeaException):
    """Raised when a write collides with an existing record."""

    status_code = 409
    code = "conflict"


class BadRequestError(SpiltTeaException):
    """Raised for semantically invalid input (unknown token, wrong OTP)."""

    status_code = 400
    code = "bad_request"


class UnauthorizedError(SpiltTeaException):
    """Raised when credentials are missing or rejected."""

    status_code = 401
    code = "unauthorized"
