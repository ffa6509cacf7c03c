"""Error Hierarchy — typed, categorized exceptions for all TeamPool failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are raised before any write; infrastructure errors are 500-level
    - to_response() produces the REST envelope consumed by the HTTP layer
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TeamPoolError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
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
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    team_id: str | None = None
    user_id: str | None = None
    expense_id: int | None = None
    debug_info: dict[str, Any] | None = None


class TeamPoolError(Exception):
    """Base exception for all TeamPool errors."""

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
                    "team_id": self.context.team_id,
                    "user_id": self.context.user_id,
                    "expense_id": self.context.expense_id,
                },
            }
        }


# ─── Validation Errors (400) ────────────────────────────────────

class InvalidAmountError(TeamPoolError):
    """Amount is non-numeric, non-finite, not positive, or out of range."""
    def __init__(self, value: object, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid amount: {value!r}. Must be a positive number.",
            "INVALID_AMOUNT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.value = value


class InvalidFieldError(TeamPoolError):
    """A writable field failed validation (name, description, date, id list)."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class InvalidParticipantsError(TeamPoolError):
    """Expense participants include users who are not team members."""
    def __init__(self, user_ids: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"Participants are not members of this team: {', '.join(user_ids)}",
            "INVALID_PARTICIPANTS", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.user_ids = user_ids


# ─── Domain Errors ──────────────────────────────────────────────

class DuplicateNameError(TeamPoolError):
    """A team with this name already exists."""
    def __init__(self, name: str, context: ErrorContext | None = None):
        super().__init__(
            f"Team name '{name}' already exists",
            "DUPLICATE_NAME", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.name = name


class AuthenticationRequiredError(TeamPoolError):
    """No caller identity was supplied by the identity gateway."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Authentication required",
            "AUTHENTICATION_REQUIRED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 401,
        )


class UnauthorizedError(TeamPoolError):
    """Caller is not allowed to perform this action (owner-only)."""
    def __init__(self, action: str, context: ErrorContext | None = None):
        super().__init__(
            f"Unauthorized: only the team creator can {action}",
            "UNAUTHORIZED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )
        self.action = action


class ResourceNotFoundError(TeamPoolError):
    """Requested resource does not exist."""
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


class InvalidOrExpiredInviteError(TeamPoolError):
    """Invitation token is unknown or past its expiry."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Invalid or expired invitation",
            "INVALID_OR_EXPIRED_INVITE", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )


class OwnerCannotLeaveError(TeamPoolError):
    """Team creator attempted to leave instead of deleting the team."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Team creator cannot leave. Please delete the team instead.",
            "OWNER_CANNOT_LEAVE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )


class NotAMemberError(TeamPoolError):
    """User has no membership row for the team."""
    def __init__(self, user_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"User '{user_id}' is not a member of this team",
            "NOT_A_MEMBER", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )
        self.user_id = user_id


# ─── Infrastructure Errors ──────────────────────────────────────

class DatabaseError(TeamPoolError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class ConstraintViolationError(TeamPoolError):
    """Storage-layer integrity failure (unique key, foreign key, not null)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Integrity constraint violated: {message}",
            "CONSTRAINT_VIOLATION", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
