"""
Application error taxonomy.

Every error carries the HTTP status it maps to and a stable machine-readable
`error_code`; main.py turns them into error_response envelopes.
"""

from typing import Optional

from backend.auth.policy import FREE_TIER_TODO_LIMIT


class AppError(Exception):
    status_code = 500
    error_code = "internal_error"
    default_message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(AppError):
    status_code = 401
    error_code = "unauthenticated"
    default_message = "Authentication required"


class Forbidden(AppError):
    status_code = 403
    error_code = "forbidden"
    default_message = "You are not allowed to perform this action"


class QuotaExceeded(AppError):
    status_code = 403
    error_code = "quota_exceeded"
    default_message = (
        f"Free users can only create up to {FREE_TIER_TODO_LIMIT} todos. "
        "Please subscribe for more."
    )


class NotFound(AppError):
    status_code = 404
    error_code = "not_found"
    default_message = "Resource not found"


class Invalid(AppError):
    status_code = 400
    error_code = "invalid"
    default_message = "Invalid request"


class UpstreamUnavailable(AppError):
    """The only error class worth retrying (idempotent reads only)."""
    status_code = 503
    error_code = "upstream_unavailable"
    default_message = "A required service is temporarily unavailable"


class IdentityProviderUnavailable(UpstreamUnavailable):
    default_message = "Identity provider is temporarily unavailable"
