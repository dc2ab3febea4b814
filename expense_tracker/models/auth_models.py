"""
Authentication Pipeline Models.

Pydantic models and enumerations for the auth request/response
contracts between ``AuthService`` and the screens.  Every auth operation
returns a structured, inspectable result rather than raw strings or
exception side-channels.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from expense_tracker.models.enums import Route
from expense_tracker.models.user import UserProfile


# ---------------------------------------------------------------------------
# Error classification
# ---------------------------------------------------------------------------

class AuthErrorCode(StrEnum):
    """Categories of authentication failure shown to the user."""

    INVALID_CREDENTIALS = "invalid_credentials"
    EMAIL_ALREADY_EXISTS = "email_already_exists"
    NETWORK_ERROR = "network_error"
    VALIDATION_ERROR = "validation_error"
    SESSION_EXPIRED = "session_expired"
    UNKNOWN_ERROR = "unknown_error"


# HTTP status -> (code, fallback message) for the auth endpoints.  The
# server's envelope message wins over the fallback when present.
AUTH_STATUS_MAP: dict[int, tuple[AuthErrorCode, str]] = {
    400: (AuthErrorCode.VALIDATION_ERROR, "Please check the submitted details."),
    401: (AuthErrorCode.INVALID_CREDENTIALS, "Incorrect email or password."),
    403: (AuthErrorCode.INVALID_CREDENTIALS, "Incorrect email or password."),
    404: (AuthErrorCode.INVALID_CREDENTIALS, "Incorrect email or password."),
    409: (AuthErrorCode.EMAIL_ALREADY_EXISTS, "An account with this email already exists. Try signing in."),
    422: (AuthErrorCode.VALIDATION_ERROR, "Please check the submitted details."),
}


# ---------------------------------------------------------------------------
# Validation result
# ---------------------------------------------------------------------------

class ValidationResult(BaseModel):
    """Result of a single client-side field validation check."""

    is_valid: bool
    error_message: Optional[str] = None


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class RegisterProfile(BaseModel):
    """Sign-up form values; dumped camelCase for ``/api/auth/sign-up``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    first_name: str
    last_name: str
    email: str
    password: str


class AuthPayload(BaseModel):
    """``data`` of a successful sign-in / sign-up response."""

    token: str
    user: UserProfile


# ---------------------------------------------------------------------------
# Unified auth response
# ---------------------------------------------------------------------------

class AuthResult(BaseModel):
    """Unified response for login and registration.

    The screen inspects ``success`` to decide between the happy path and
    the error path, shows ``error_message`` verbatim, and follows
    ``redirect_to`` when set.

    Attributes
    ----------
    success:
        ``True`` when the operation completed without error.
    error_code:
        Structured error category (``None`` on success).
    error_message:
        Human-readable error description (``None`` on success).
    user:
        The authenticated profile on success.
    redirect_to:
        Route the caller should show next.
    """

    success: bool
    error_code: Optional[AuthErrorCode] = None
    error_message: Optional[str] = None
    user: Optional[UserProfile] = None
    redirect_to: Optional[Route] = None
