"""
SnippetBox Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for every error the API reports.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by repositories, services and dependencies; caught by global handlers.

Exception Hierarchy:
    SnippetBoxError (base)
    ├── ValidationError     → 400 Bad Request (client can fix)
    ├── UnauthorizedError   → 401 Unauthorized (missing/invalid/expired credential)
    ├── ForbiddenError      → 403 Forbidden (authenticated, but not the owner)
    ├── NotFoundError       → 404 Not Found (absent, or owned by someone else)
    ├── ConflictError       → 409 Conflict (duplicate name, referenced entity)
    └── InternalError       → 500 Internal Server Error
        └── DatabaseError   → 500 (store failure, transaction rolled back)
"""

from typing import Any, Dict, Optional


class SnippetBoxError(Exception):
    """
    Base exception for all SnippetBox application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned for 5xx errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(SnippetBoxError):
    """
    Raised when client input fails validation.

    When:    Missing title, empty file list, file without filename/content,
             blank category/tag/language name, unknown language id.
    HTTP:    400 Bad Request
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


class UnauthorizedError(SnippetBoxError):
    """
    Raised when a request has no usable credential.

    When:    Missing or non-Bearer Authorization header, bad signature,
             expired token, token for a user that no longer exists,
             or a failed login.
    HTTP:    401 Unauthorized (with `WWW-Authenticate: Bearer`)
    """

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(SnippetBoxError):
    """
    Raised when the caller is authenticated but does not own the resource.

    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "You do not have permission to modify this resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(SnippetBoxError):
    """
    Raised when a requested resource does not exist.

    For snippets, "exists but belongs to another user" is reported the same
    way, so ids of other users' snippets cannot be probed.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        label = resource[:1].upper() + resource[1:]
        message = f"{label} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(SnippetBoxError):
    """
    Raised when a write would break a uniqueness or reference rule.

    When:    Duplicate username/email, duplicate category/tag name for the
             same user, duplicate language name, deleting a language that
             snippets still reference.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InternalError(SnippetBoxError):
    """
    Raised for unexpected failures the client cannot fix.

    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "An internal error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(InternalError):
    """
    Raised when a store operation fails unexpectedly.

    The surrounding transaction has already been rolled back when this is
    raised. The message returned to the client is always generic; the
    original exception type is kept in `context` for the server log.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
