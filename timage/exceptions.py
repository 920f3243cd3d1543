"""
T-Image API: Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions for each failure class of the API.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers (registered in main.py) translate them into
       JSON error responses with the right HTTP status.
Who:   Raised by services and the credential verifier; caught by handlers.

Exception Hierarchy:
    TImageError (base)
    ├── AuthenticationError      → 401 Unauthorized (missing/bad credentials)
    ├── InvalidCredentialsError  → 400 Bad Request (login / old password)
    ├── ForbiddenError           → 403 Forbidden (valid caller, not the owner)
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 400 Bad Request (unique constraint)
    └── DatabaseError            → 500 Internal Server Error

Structural input errors are not part of this hierarchy: FastAPI raises
RequestValidationError for them, rendered as 422 by main.py.
"""

from typing import Any, Dict, Optional


class TImageError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class AuthenticationError(TImageError):
    """
    Raised when a protected endpoint is called without valid credentials.

    The message is always the same opaque "Unauthorized": a missing header,
    a malformed header, an unknown username and a wrong password are
    indistinguishable to the client.
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Unauthorized", context=context)


class InvalidCredentialsError(TImageError):
    """Raised by login and password reset when a supplied password is wrong."""

    def __init__(
        self,
        message: str = "Invalid username or password",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(TImageError):
    """
    Raised when an authenticated caller acts on a record it does not own.

    Distinct from AuthenticationError: the identity is known, the rights
    are missing.
    """

    def __init__(
        self,
        message: str = "Forbidden",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(TImageError):
    """Raised when a requested resource does not exist."""

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(TImageError):
    """
    Raised when an insert violates a uniqueness invariant.

    Produced by `database.create_record` from the driver's IntegrityError,
    then re-raised by services with a resource-specific message.
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(TImageError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic; the original
    error type is kept in `context` for the server log only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
