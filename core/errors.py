"""Domain errors raised by the stores and services.

Routers never build error responses for these by hand: ``main.py`` maps
every :class:`AppError` subclass to its HTTP status in one handler.
"""
from starlette import status


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputValidationError(AppError):
    """Missing or malformed input: empty content, no images, bad extension."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(AppError):
    """The entity exists but the actor may not change it."""

    status_code = status.HTTP_403_FORBIDDEN


class ConflictError(AppError):
    """A composite-key relation row already exists."""

    status_code = status.HTTP_409_CONFLICT


class StorageFault(AppError):
    """The database failed or timed out. The message is safe to show to clients."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class AuthenticationError(AppError):
    """Wrong credentials on login."""

    status_code = status.HTTP_401_UNAUTHORIZED
