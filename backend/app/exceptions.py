"""
Biodex Backend - Custom Exception Hierarchy
============================================

What:  Application-specific exceptions for the different error scenarios.
Why:   Targeted handling with the right HTTP status codes and user-facing
       messages, without leaking internal details to the client.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) turn them into JSON
       for /api routes and into an error page (or redirect) for HTML routes.
Who:   Raised by services, the session guard and the species editor.

Exception Hierarchy:
    BiodexError (base)
    ├── ValidationError              → 400 Bad Request (client can fix)
    ├── AuthenticationRequiredError  → 303 redirect to "/" (pages) / 401 (API)
    ├── PermissionDeniedError        → 403 Forbidden
    ├── NotFoundError                → 404 Not Found
    ├── EditorStateError             → 409 Conflict
    └── DatabaseError                → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class BiodexError(Exception):
    """
    Base exception for all Biodex application errors.

    Attributes:
        message:  User-facing error description (safe to show)
        context:  Additional debug info (logged, not returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BiodexError):
    """
    Raised when submitted form data fails validation.

    What:    The client sent values that can be corrected and resubmitted.
    When:    Species form validation (blank scientific name, unknown kingdom,
             non-positive population, malformed image URL).
    HTTP:    400 Bad Request

    `errors` maps each offending field to its message so the form can show
    the message next to the input.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[Dict[str, str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.errors = dict(errors or {})
        ctx = context or {}
        if self.errors:
            ctx["errors"] = self.errors
        super().__init__(message=message, context=ctx)


class AuthenticationRequiredError(BiodexError):
    """
    Raised when a protected route is reached without a valid session.

    HTTP:    303 redirect to "/" for pages, 401 Unauthorized for the JSON API.
    """

    def __init__(
        self,
        message: str = "You must be signed in to view this page",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PermissionDeniedError(BiodexError):
    """
    Raised when the session user is not the author of the record they try to
    change.

    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "Only the author of this record can change it",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(BiodexError):
    """
    Raised when a requested record does not exist.

    HTTP:    404 Not Found
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


class EditorStateError(BiodexError):
    """
    Raised when an editor action is not available in the editor's current
    state (e.g. confirming while viewing, answering with no pending prompt).

    HTTP:    409 Conflict
    """

    def __init__(
        self,
        action: str,
        state: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx.update({"action": action, "state": state})
        super().__init__(
            message=f"Cannot {action} while the editor is {state}",
            context=ctx,
        )
        self.action = action
        self.state = state


class DatabaseError(BiodexError):
    """
    Raised when a database operation fails unexpectedly.

    HTTP:    500 Internal Server Error

    The message is human-readable and generic; driver details (SQL, constraint
    names) go into `context` and are only logged.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
