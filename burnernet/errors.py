from __future__ import annotations

from typing import Dict, Optional


class ApiError(Exception):
    """Base class for errors that map onto an HTTP status and a JSON error payload."""

    status = 400

    def __init__(self, message: str, *, fields: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.fields = fields or {}


class ValidationError(ApiError):
    """Raised when request input is missing or malformed."""

    status = 400

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, fields={field: message})


class ConflictError(ApiError):
    """Raised when a uniqueness rule (username, codename, invite code) is violated."""

    status = 400


class AuthenticationError(ApiError):
    status = 401


class PermissionDenied(ApiError):
    status = 403


class NotFound(ApiError):
    status = 404


class UpstreamServiceError(ApiError):
    """Raised when an external service (archive store) cannot serve a request."""

    status = 502


class ImmutableRecordError(Exception):
    """Raised when code tries to update a record that is write-once."""
