"""
Scriblink Backend — Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for every expected failure outcome.
Why:   Each failure carries a tag (its class), a human-readable message and a
       context dict (ids, thresholds, computed metrics) so a client can render
       an actionable message.
How:   Services raise these; global handlers registered in main.py turn each
       into a structured JSON body with the matching HTTP status code.

Exception Hierarchy:
    ScriblinkError (base)
    ├── ValidationError              → 400 Bad Request (invalid input)
    ├── AuthenticationError          → 401 Unauthorized
    ├── PermissionDeniedError        → 403 Forbidden (owner mismatch)
    ├── NotFoundError                → 404 Not Found
    ├── ConflictError                → 409 Conflict
    │   └── StructuralViolationError → 409 (self-move, cyclic move, duplicate root)
    ├── SummaryRejectedError         → 422 Unprocessable Entity
    │   ├── LengthExceededError
    │   ├── MetaLanguageError
    │   └── LowRelevanceError
    ├── LLMServiceError              → 503 Service Unavailable
    │   └── CircuitBreakerOpenError  → 503 (circuit open)
    └── DatabaseError                → 500 Internal Server Error

None of these are process-fatal; every one is a recoverable outcome for the
caller.
"""

from typing import Any, Dict, Optional


class ScriblinkError(Exception):
    """
    Base exception for all Scriblink application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional diagnostic info (ids, thresholds, metrics)
    """

    #: Machine-readable code used in the JSON error body.
    code = "scriblink_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ScriblinkError):
    """
    Raised when client input fails validation (empty text, blank label, ...).

    HTTP: 400 Bad Request
    """

    code = "validation_error"

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


class AuthenticationError(ScriblinkError):
    """Raised when a username/password pair does not match. HTTP: 401."""

    code = "authentication_failed"

    def __init__(self, message: str = "Invalid username or password."):
        super().__init__(message=message)


class PermissionDeniedError(ScriblinkError):
    """
    Raised when a user acts on a resource owned by someone else.

    HTTP: 403 Forbidden
    """

    code = "permission_denied"

    def __init__(
        self,
        message: str = "You do not have permission to perform this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(ScriblinkError):
    """
    Raised when a folder, item, note, tag, summary or parent cannot be resolved.

    HTTP: 404 Not Found
    """

    code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(ScriblinkError):
    """
    Raised when the request conflicts with existing state (duplicate username,
    item already tagged).

    HTTP: 409 Conflict
    """

    code = "conflict"

    def __init__(
        self,
        message: str = "The request conflicts with existing data",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StructuralViolationError(ConflictError):
    """
    Raised when an operation would break the folder hierarchy.

    Violations:
        self_move    -- moving a folder into itself
        cyclic_move  -- moving a folder into one of its descendants
        root_exists  -- initializing a second root for the same user
    """

    code = "structural_violation"

    def __init__(
        self,
        message: str,
        violation: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["violation"] = violation
        super().__init__(message=message, context=ctx)
        self.violation = violation


class SummaryRejectedError(ScriblinkError):
    """
    Raised when a candidate summary fails validation.

    The `reason` attribute names the failing check (length_exceeded,
    meta_language, low_relevance); the message carries the diagnostic.

    HTTP: 422 Unprocessable Entity
    """

    code = "summary_rejected"
    reason = "validation_failed"

    def __init__(
        self,
        message: str = "Summary failed validation",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["reason"] = self.reason
        super().__init__(message=message, context=ctx)


class LengthExceededError(SummaryRejectedError):
    reason = "length_exceeded"


class MetaLanguageError(SummaryRejectedError):
    reason = "meta_language"


class LowRelevanceError(SummaryRejectedError):
    reason = "low_relevance"


class LLMServiceError(ScriblinkError):
    """
    Raised when the text-generation service (Gemini) fails.

    What:    The model could not be reached or returned an error.
    When:    Single attempt; there is no retry on the summary path.
    HTTP:    503 Service Unavailable
    """

    code = "llm_service_error"

    def __init__(
        self,
        message: str = "AI summary service is temporarily unavailable",
        retry_after: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if retry_after:
            ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class CircuitBreakerOpenError(LLMServiceError):
    """
    Raised when the circuit breaker is OPEN after repeated Gemini failures.

    Subclass of LLMServiceError so callers treating "the model is unreachable"
    as one outcome catch both.
    """

    code = "service_unavailable"

    def __init__(
        self,
        recovery_time: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"AI service is temporarily unavailable due to repeated failures. "
            f"The service will automatically retry in approximately {recovery_time} seconds."
        )
        ctx = context or {}
        ctx["recovery_time"] = recovery_time
        super().__init__(message=message, retry_after=recovery_time, context=ctx)
        self.recovery_time = recovery_time


class DatabaseError(ScriblinkError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic; details are
    logged server-side only.

    HTTP: 500 Internal Server Error
    """

    code = "server_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
