"""Error Hierarchy — typed, categorized exceptions for all car registry failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (4xx) are request-scoped and never retried by the core
    - Infrastructure errors (5xx) are opaque: no SQL or driver details in messages
    - to_response() produces the REST envelope used by the global handlers

Design Decisions:
    - Single hierarchy with CarRegistryError base: FastAPI global handler catches all
      (ADR: uniform error shape)
    - Invalid search criteria reported as NotFoundError, not a validation error
      (ADR: clients cannot distinguish "no such field" from "no such car")
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
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    PRECONDITION = "precondition"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    car_id: int | None = None
    criteria: dict[str, Any] | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class CarRegistryError(Exception):
    """Base exception for all car registry errors."""

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
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "car_id": self.context.car_id,
                    "criteria": self.context.criteria,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class NotFoundError(CarRegistryError):
    """No car matches an id or a criteria set."""
    def __init__(self, reference: Any, context: ErrorContext | None = None):
        super().__init__(
            f"No car found for {reference!r}",
            "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.reference = reference


class DuplicateKeyError(CarRegistryError):
    """VIN already used by another car."""
    def __init__(self, value: str, context: ErrorContext | None = None):
        super().__init__(
            f"VIN '{value}' already exists",
            "DUPLICATE_KEY", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 422,
        )
        self.value = value


class VersionInvalidError(CarRegistryError):
    """Version token is not a quoted non-negative integer."""
    def __init__(self, token: str | None, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid version token: {token!r}",
            "VERSION_INVALID", ErrorCategory.PRECONDITION,
            ErrorSeverity.ERROR, context, 412,
        )
        self.token = token


class VersionOutdatedError(CarRegistryError):
    """Version token is older than the stored version."""
    def __init__(self, version: int, context: ErrorContext | None = None):
        super().__init__(
            f"Version {version} is outdated",
            "VERSION_OUTDATED", ErrorCategory.PRECONDITION,
            ErrorSeverity.ERROR, context, 412,
        )
        self.version = version


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(CarRegistryError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class ConcurrencyError(CarRegistryError):
    """Row changed between read and write (version column mismatch at flush)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONCURRENCY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
