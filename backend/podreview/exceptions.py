"""
PodReview Backend — Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions, one per error kind the API reports.
How:   Each exception carries a user-facing message and a context dict.
       Global handlers registered in main.py turn them into JSON responses
       with a fixed status code per kind.
Who:   Raised by services and the identity resolver; caught by main.py.

Exception Hierarchy:
    PodReviewError (base)
    ├── ValidationError       → 400 Bad Request
    ├── AuthenticationError   → 401 Unauthorized
    ├── AuthorizationError    → 403 Forbidden
    ├── NotFoundError         → 404 Not Found
    ├── ConflictError         → 409 Conflict
    └── DatabaseError         → 500 Internal Server Error

Every kind is terminal for the request: nothing in this layer retries.
"""

from typing import Any, Dict, Iterable, Optional


class PodReviewError(Exception):
    """
    Base exception for all PodReview application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Extra detail; returned as `details` for client errors and
                  only logged for server errors
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PodReviewError):
    """
    Raised when client input fails validation.

    When:  Missing required fields, a required field emptied by a patch,
           malformed identifiers, or a row the storage layer refuses.
    HTTP:  400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Missing required fields: rating, spoilers",
            "details": {"missing": ["rating", "spoilers"]}
        }
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

    @classmethod
    def missing(cls, fields: Iterable[str]) -> "ValidationError":
        """Build the error reported when required fields are absent or empty."""
        names = sorted(fields)
        return cls(
            message=f"Missing required fields: {', '.join(names)}",
            context={"missing": names},
        )


class AuthenticationError(PodReviewError):
    """
    Raised when the caller's identity cannot be established.

    When:  No bearer token, an invalid or expired token, a token for a user
           that no longer exists, or wrong login credentials.
    HTTP:  401 Unauthorized (with `WWW-Authenticate: Bearer`)
    """

    def __init__(
        self,
        message: str = "Could not validate credentials",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthorizationError(PodReviewError):
    """
    Raised when an authenticated caller acts on a record they do not own.

    When:  Update or delete of another user's review.
    HTTP:  403 Forbidden

    Raised before any mutation, so the record is always left untouched.
    """

    def __init__(
        self,
        message: str = "You are not allowed to modify this record",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(PodReviewError):
    """
    Raised when an identifier does not resolve to a record.

    HTTP:  404 Not Found
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


class ConflictError(PodReviewError):
    """
    Raised when a write would break a uniqueness rule.

    When:  A second review for the same (reviewer, podcast, episode), a second
           podcast with the same name, or a second account for one email.
           Raised either by the pre-check query or by translating the storage
           layer's unique-constraint violation.
    HTTP:  409 Conflict
    """

    def __init__(
        self,
        message: str = "The record conflicts with an existing one",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(PodReviewError):
    """
    Raised when a database operation fails unexpectedly.

    HTTP:  500 Internal Server Error

    The client only ever sees a generic message; `context` is logged.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
