# src/storefront/core/exceptions.py

from fastapi import status


class AppError(Exception):
    """Base exception for errors reported to the API caller."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Raised when request data is missing or violates a field rule."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request data"


class AuthenticationError(AppError):
    """Raised when credentials or the bearer token cannot be verified."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized to access this route"


class AuthorizationError(AppError):
    """Raised when an authenticated user lacks the role an operation requires."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not allowed to access this route"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class DatabaseUnavailableError(AppError):
    default_message = "Database is not available"
