"""
Error taxonomy shared by the service modules and the HTTP layer.
"""

from __future__ import annotations


class TemerioError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 500
    default_message = "Unknown error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class UnauthorizedError(TemerioError):
    status_code = 401
    default_message = "Unauthorized"


class ValidationError(TemerioError):
    status_code = 400
    default_message = "Invalid request"


class NotFoundError(TemerioError):
    status_code = 404
    default_message = "Not found"


class TransientError(TemerioError):
    """An upstream provider could not be reached; the caller may retry."""

    status_code = 503
    default_message = "Upstream service unavailable"
