"""Typed API errors raised by services and converted to the response envelope in main.py."""

from fastapi import status


class ApiError(Exception):
    """Base error carrying the HTTP status and a user-facing message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class BadRequestError(ApiError):
    """Malformed or missing input that is not a schema violation (e.g. self-deletion)."""

    status_code = status.HTTP_400_BAD_REQUEST


class InvalidPayloadError(BadRequestError):
    """Schema validation failure; errors holds one {field, message} entry per offending field."""

    def __init__(self, errors: list[dict[str, str]], message: str = "Validation failed") -> None:
        self.errors = errors
        super().__init__(message)


class AuthenticationError(ApiError):
    """Missing, invalid or expired credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(ApiError):
    """Valid identity whose role may not perform the action."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ApiError):
    """Uniqueness or ownership violation (duplicate email, duplicate rating, store already owned)."""

    status_code = status.HTTP_409_CONFLICT
