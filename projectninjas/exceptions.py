"""
Domain errors raised by the kernel services.

Each error carries the HTTP status it maps to; the handlers in
``projectninjas.main`` render them as ``{"message": ...}``.
"""

from typing import Optional

from fastapi import status


class ProjectNinjasError(Exception):
    """Base class for all expected service failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server error."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequestError(ProjectNinjasError):
    """A required field is missing or has an unusable value."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request."


class UnauthorizedError(ProjectNinjasError):
    """Missing, invalid or expired token, or bad login credentials."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authorization token is required."


class ForbiddenError(ProjectNinjasError):
    """Authenticated but not entitled."""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized."


class NotFoundError(ProjectNinjasError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class ConflictError(ProjectNinjasError):
    """Duplicate email, duplicate access request or a request already answered."""
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict."


class StorageError(ProjectNinjasError):
    """The content directory could not be read or written."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error during file storage."
