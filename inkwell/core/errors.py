"""Error Hierarchy — typed, categorized exceptions for all Inkwell failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every error knows its HTTP status; the API layer never picks a status itself
    - to_response() produces the REST failure envelope {success, error, message}
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with InkwellError base: FastAPI global handler catches all
    - SelfReferenceError subclasses ValidationError: same 400 contract, distinct code
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BAD_REQUEST = "bad_request"
    RESOURCE_NOT_FOUND = "resource_not_found"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    resource_type: str | None = None
    resource_id: str | None = None
    actor_id: str | None = None
    debug_info: dict[str, Any] | None = None


class InkwellError(Exception):
    """Base exception for all Inkwell errors."""

    title = "Internal server error"

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the standard REST failure envelope."""
        return {
            "success": False,
            "error": self.title,
            "message": self.message,
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationError(InkwellError):
    """A field is missing or malformed."""
    title = "Validation error"

    def __init__(
        self, message: str, field: str | None = None,
        context: ErrorContext | None = None, code: str = "VALIDATION_ERROR",
    ):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field


class SelfReferenceError(ValidationError):
    """A user tried to follow or unfollow themselves."""
    def __init__(self, user_id: str, context: ErrorContext | None = None):
        super().__init__(
            "You cannot follow yourself", "userId", context, "SELF_REFERENCE",
        )
        self.user_id = user_id


class BadRequestError(InkwellError):
    """The request is well-formed but cannot be acted on (empty patch, missing actor)."""
    title = "Bad request"

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "BAD_REQUEST", ErrorCategory.BAD_REQUEST,
            ErrorSeverity.WARNING, context, 400,
        )


class ResourceNotFoundError(InkwellError):
    """Requested resource does not exist."""
    title = "Not found"

    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource_type = resource_type
        ctx.resource_id = resource_id
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ctx, 404,
        )


class ForbiddenError(InkwellError):
    """Actor is not allowed to modify the resource."""
    title = "Forbidden"

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.FORBIDDEN,
            ErrorSeverity.WARNING, context, 403,
        )


class ConflictError(InkwellError):
    """A unique key (username, email, edge) already exists."""
    title = "Duplicate key error"

    def __init__(
        self, message: str, field: str | None = None, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )
        self.field = field


# ─── Infrastructure Errors (500-level) ──────────────────────────

class ServiceUnavailableError(InkwellError):
    """Storage is unreachable or timed out."""
    title = "Database unavailable"

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_UNAVAILABLE", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class InternalError(InkwellError):
    """Unclassified failure."""
    title = "Internal server error"

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INTERNAL_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
