"""Error Hierarchy: one exception tree for every failure a StudyHub request can hit.

Invariants:
    - Each concrete class fixes its code, category, severity and HTTP status as
      class attributes; instances only vary in message and context
    - 4xx errors are terminal for the given input; DatabaseError is always retryable
    - to_response() is the only place the REST error envelope is built
    - Messages are user-facing: no SQL, no driver text, no stack detail

Design Decisions:
    - Admission rejections share AdmissionRejectedError so callers can catch
      "not admitted" without listing every reason
    - ErrorContext carries the (user_id, group_id) pair used in log extras
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Who and what the failing request was about."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: int | None = None
    group_id: int | None = None
    retryable: bool = False
    debug_info: dict[str, Any] | None = None


class StudyHubError(Exception):
    """Base for all StudyHub errors. Subclasses override the class attributes."""

    code: str = "INTERNAL_ERROR"
    category: ErrorCategory = ErrorCategory.INTERNAL
    severity: ErrorSeverity = ErrorSeverity.ERROR
    http_status: int = 500

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()

    def envelope_fields(self) -> dict[str, Any]:
        """Extra top-level keys for the error envelope."""
        return {}

    def to_response(self) -> dict:
        ctx = self.context
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": ctx.timestamp.isoformat(),
                "context": {
                    "user_id": ctx.user_id,
                    "group_id": ctx.group_id,
                    "retryable": ctx.retryable,
                },
                **self.envelope_fields(),
            }
        }


# --- 4xx: caller must change the request ---------------------------------------

class InputValidationError(StudyHubError):
    """Input passed the schema but is still unusable (e.g. whitespace-only text)."""
    code = "VALIDATION_ERROR"
    category = ErrorCategory.VALIDATION
    severity = ErrorSeverity.WARNING
    http_status = 400

    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(message, context)
        self.field = field

    def envelope_fields(self) -> dict[str, Any]:
        return {"field": self.field}


class UnauthenticatedError(StudyHubError):
    code = "UNAUTHENTICATED"
    category = ErrorCategory.AUTHENTICATION
    severity = ErrorSeverity.WARNING
    http_status = 401

    def __init__(self, message: str = "Invalid credentials", context: ErrorContext | None = None):
        super().__init__(message, context)


class NotGroupMemberError(StudyHubError):
    code = "NOT_GROUP_MEMBER"
    category = ErrorCategory.AUTHORIZATION
    severity = ErrorSeverity.WARNING
    http_status = 403

    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Only group members can post messages", context)


class ResourceNotFoundError(StudyHubError):
    code = "RESOURCE_NOT_FOUND"
    category = ErrorCategory.RESOURCE_NOT_FOUND
    severity = ErrorSeverity.WARNING
    http_status = 404

    def __init__(
        self, resource_type: str, resource_id: object, context: ErrorContext | None = None,
    ):
        super().__init__(f"{resource_type} '{resource_id}' not found", context)
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(StudyHubError):
    code = "CONFLICT"
    category = ErrorCategory.CONFLICT
    severity = ErrorSeverity.WARNING
    http_status = 409


class AdmissionRejectedError(StudyHubError):
    """Join refused. Stays refused until the group's membership changes."""
    category = ErrorCategory.BUSINESS_RULE
    severity = ErrorSeverity.INFO
    http_status = 400


class AlreadyMemberError(AdmissionRejectedError):
    code = "ALREADY_MEMBER"

    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Already a member", context)


class GroupFullError(AdmissionRejectedError):
    code = "GROUP_FULL"

    def __init__(self, max_members: int, context: ErrorContext | None = None):
        super().__init__(f"Group full ({max_members}/{max_members})", context)
        self.max_members = max_members


# --- 5xx: nothing was committed --------------------------------------------------

class DatabaseError(StudyHubError):
    code = "DATABASE_ERROR"
    category = ErrorCategory.DATABASE
    severity = ErrorSeverity.CRITICAL
    http_status = 500

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            replace(context or ErrorContext(), retryable=True),
        )
        self.operation = operation
