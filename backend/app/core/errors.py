"""Error Hierarchy — typed, categorized exceptions for every data-access failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are caller mistakes; persistence and asset errors are 500-level
    - to_response() produces the REST envelope used by the API error handlers
    - InvalidCredentialsError carries one fixed message whatever the cause

Design Decisions:
    - Single hierarchy with DrinkReviewError base: FastAPI global handler catches all
    - ErrorContext as dataclass: ids of the entities involved travel with the error
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
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHENTICATION = "authentication"
    CONFLICT = "conflict"
    PERSISTENCE = "persistence"
    CONSISTENCY = "consistency"
    ASSET = "asset"
    DATABASE = "database"


@dataclass
class ErrorContext:
    """Entity ids and debug payload attached to an error."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    review_id: str | None = None
    drink_id: str | None = None
    debug_info: dict[str, Any] | None = None


class DrinkReviewError(Exception):
    """Base exception for all data-access errors."""

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
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "user_id": self.context.user_id,
                    "review_id": self.context.review_id,
                    "drink_id": self.context.drink_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InputValidationError(DrinkReviewError):
    """An input value failed a format or shape check."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class DuplicateEmailError(DrinkReviewError):
    """Registration attempted with an email that already has an account."""
    def __init__(self, email: str, context: ErrorContext | None = None):
        super().__init__(
            f"{email} is already registered, please log in",
            "DUPLICATE_EMAIL", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.email = email


class ResourceNotFoundError(DrinkReviewError):
    """Requested user, review or drink does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


INVALID_CREDENTIALS_MESSAGE = "Either the email address or password is invalid"


class InvalidCredentialsError(DrinkReviewError):
    """Login failed. Unknown email and wrong password are indistinguishable."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            INVALID_CREDENTIALS_MESSAGE,
            "INVALID_CREDENTIALS", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class DrinkUnavailableError(DrinkReviewError):
    """Reservation attempted on a drink whose available flag is false."""
    def __init__(self, drink_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.drink_id = drink_id
        super().__init__(
            f"Drink '{drink_id}' is not available, cannot reserve",
            "DRINK_UNAVAILABLE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, ctx, 409,
        )


# ─── Persistence & Consistency Errors (500-level) ───────────────

class PersistenceError(DrinkReviewError):
    """Store acknowledged nothing, or modified nothing where a change was expected."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            message, "PERSISTENCE_ERROR", ErrorCategory.PERSISTENCE,
            ErrorSeverity.ERROR, context, 500,
        )
        self.operation = operation


class CascadeError(DrinkReviewError):
    """Secondary write of a multi-collection operation did not complete."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CASCADE_ERROR", ErrorCategory.CONSISTENCY,
            ErrorSeverity.CRITICAL, context, 500,
        )


class AssetWriteError(DrinkReviewError):
    """Uploaded picture could not be copied into the public assets directory."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Error when processing file: {message}",
            "ASSET_WRITE_ERROR", ErrorCategory.ASSET,
            ErrorSeverity.ERROR, context, 500,
        )


class AssetCleanupError(DrinkReviewError):
    """Old picture could not be removed after its record was updated."""
    def __init__(self, location: str, context: ErrorContext | None = None):
        super().__init__(
            f"Failed to delete old picture at {location}",
            "ASSET_CLEANUP_ERROR", ErrorCategory.ASSET,
            ErrorSeverity.WARNING, context, 500,
        )
        self.location = location


class DatabaseError(DrinkReviewError):
    """Database driver operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
