"""Error Hierarchy: typed, categorized exceptions for the relay's failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Local errors (auth, validation) are 400-level and never reach upstream
    - to_response() produces the {"ok": false, "error": CODE} envelope
    - No credentials or internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with RelayError base: FastAPI global handler catches all
    - Terminal upstream outcomes (parse failure, business error, exhaustion) are
      results, not exceptions: see core/domain_types.py
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    EXTERNAL_API = "external_api"
    TIMEOUT = "timeout"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    attempt: int | None = None


class RelayError(Exception):
    """Base exception for all relay errors."""

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
        """Convert to the relay's JSON error envelope."""
        return {"ok": False, "error": self.code}


# ─── Local Errors (400-level) ───────────────────────────────────

class AuthFailure(RelayError):
    """Shared-secret header missing or wrong."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Shared secret mismatch", "UNAUTHORIZED",
            ErrorCategory.AUTHENTICATION, ErrorSeverity.WARNING, context, 401,
        )


class ValidationFailure(RelayError):
    """Request body missing a required field or not a JSON object."""
    def __init__(self, field: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid or missing field: {field}", "INVALID_INPUT",
            ErrorCategory.VALIDATION, ErrorSeverity.WARNING, context, 400,
        )
        self.field = field


# ─── Infrastructure Errors ──────────────────────────────────────

class TransportFailure(RelayError):
    """One upstream attempt failed before an HTTP response was received."""
    def __init__(
        self, cause: str, timed_out: bool = False, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Upstream {'timeout' if timed_out else 'transport error'}: {cause}",
            "TRANSPORT_TIMEOUT" if timed_out else "TRANSPORT_ERROR",
            ErrorCategory.TIMEOUT if timed_out else ErrorCategory.EXTERNAL_API,
            ErrorSeverity.WARNING, context, 502,
        )
        self.cause = cause
        self.timed_out = timed_out


class CertificateLoadError(RelayError):
    """Client certificate or key unreadable at startup. Fatal."""
    def __init__(self, path: str, reason: str):
        super().__init__(
            f"Cannot load client certificate material from {path}: {reason}",
            "CERTIFICATE_UNREADABLE", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, None, 500,
        )
        self.path = path
