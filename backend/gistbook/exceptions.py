"""
Gistbook Backend - Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for every failure the API reports.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) turn them into
       structured JSON error responses with the right HTTP status code.
Who:   Raised by the validation layer, the services and the RecordStore;
       caught by the global handlers.

Exception Hierarchy:
    GistbookError (base)
    ├── MissingFieldError            → 400 Bad Request
    ├── NotFoundError                → 404 Not Found
    ├── DuplicateNameError           → 409 Conflict
    ├── SubjectInUseError            → 409 Conflict
    └── StoreError                   → 500 Internal Server Error
        └── ConstraintViolationError → 500 (unless a service translates it)

Validation errors are raised before any store call is made, so a failed
validation never leaves a partial write behind.
"""

from typing import Any, Dict, Optional


class GistbookError(Exception):
    """
    Base exception for all Gistbook application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info. Returned as `details` for client
                  errors; only logged for store errors.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class MissingFieldError(GistbookError):
    """
    Raised when a required field is absent or empty.

    HTTP: 400 Bad Request

    Example response:
        {
            "error": "missing_field",
            "message": "Title, category, and content are required.",
            "details": {"field": "title"}
        }
    """

    def __init__(
        self,
        message: str = "A required field is missing",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(GistbookError):
    """
    Raised when a requested record does not exist.

    The store returns None for missing rows; services convert that None
    into this exception so routes never deal with it.

    HTTP: 404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DuplicateNameError(GistbookError):
    """
    Raised when a subject with the same name (ignoring case) already exists.

    HTTP: 409 Conflict
    """

    def __init__(
        self,
        name: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["name"] = name
        super().__init__(
            message="Subject with this name already exists.",
            context=ctx,
        )
        self.name = name


class SubjectInUseError(GistbookError):
    """
    Raised when deleting a subject that snippets still reference.

    The message names the subject and the number of blocking snippets so the
    client can show it verbatim.

    HTTP: 409 Conflict
    """

    def __init__(
        self,
        name: str,
        snippet_count: int,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Cannot delete subject '{name}'. It still has {snippet_count} "
            f"associated gist(s). Please reassign or delete gists in this subject first."
        )
        ctx = context or {}
        ctx["name"] = name
        ctx["snippet_count"] = snippet_count
        super().__init__(message=message, context=ctx)
        self.name = name
        self.snippet_count = snippet_count


class StoreError(GistbookError):
    """
    Raised when a store operation fails.

    What:    Wraps any underlying SQLAlchemy/driver failure (I/O error,
             locked database, constraint violation).
    HTTP:    500 Internal Server Error

    The original driver message is kept in `context["original_error"]` for
    the server log. The API response only ever carries a generic message.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConstraintViolationError(StoreError):
    """
    Raised when a statement violates a table constraint (unique index,
    NOT NULL). Services that expect a specific violation translate it into a
    client error; anything left unhandled is reported as a plain store error.
    """
