"""
OpenMusic API — Custom Exception Hierarchy
===========================================

What:  Defines application-specific exceptions for different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and the token dependency; caught by global handlers.

Exception Hierarchy:
    OpenMusicError (base)
    ├── ValidationError          → 400 Bad Request (upload rejected)
    ├── InvariantError           → 400 Bad Request (write did not apply)
    ├── AuthenticationError      → 401 Unauthorized (missing/invalid token)
    ├── AuthorizationError       → 403 Forbidden (valid caller, no rights)
    ├── NotFoundError            → 404 Not Found
    └── FileStorageError         → 500 Internal Server Error

Anything else (storage unavailable, driver errors) is not wrapped and ends up
in the catch-all 500 handler.
"""

from typing import Any, Dict, Optional


class OpenMusicError(Exception):
    """
    Base exception for all OpenMusic application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; only some handlers return it)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(OpenMusicError):
    """
    Raised when client input fails a business validation rule.

    When:    Cover file type mismatch, size exceeded.
    HTTP:    400 Bad Request

    Schema-level validation of JSON bodies stays with FastAPI (422).
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class InvariantError(OpenMusicError):
    """
    Raised when a write operation's postcondition was not met.

    When:    INSERT returned no row, a unique/foreign key constraint rejected
             the row, a username is already taken, a song is already attached.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "The operation could not be applied",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthenticationError(OpenMusicError):
    """
    Raised when a protected route is called without a valid access token.

    HTTP:    401 Unauthorized (with WWW-Authenticate: Bearer)
    """

    def __init__(
        self,
        message: str = "Missing or invalid access token",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthorizationError(OpenMusicError):
    """
    Raised when an authenticated caller lacks rights on an existing resource.

    When:    Non-owner deletes a playlist; a user who is neither owner nor
             collaborator touches a playlist's songs or activities.
    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "You are not allowed to access this resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(OpenMusicError):
    """
    Raised when a requested resource does not exist.

    When:    Lookups, updates or deletes by id that match zero rows.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing records (not an exception);
    services convert None → NotFoundError.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class FileStorageError(OpenMusicError):
    """
    Raised when file system operations fail.

    When:    Disk full, permission denied, directory not writable, I/O error.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
