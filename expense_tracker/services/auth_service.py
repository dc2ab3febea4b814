"""
Authentication Service.

Orchestrates every authentication flow of the client: login,
registration, logout, startup session restoration and current-user
resolution, plus error classification.

Sits between the screens and the ``UserRepository`` / ``SessionManager``
pair so that the entry form stays a thin handler.  All public flows
return typed ``AuthResult`` or ``ValidationResult`` models; the screens
never inspect raw exceptions.
"""

from __future__ import annotations

import re
from typing import Optional

from expense_tracker.auth import SessionManager
from expense_tracker.errors import ApiError, NetworkError, RequestFailed, Unauthorized
from expense_tracker.logger import StructuredLogger
from expense_tracker.models.auth_models import (
    AUTH_STATUS_MAP,
    AuthErrorCode,
    AuthResult,
    RegisterProfile,
    ValidationResult,
)
from expense_tracker.models.enums import Route
from expense_tracker.models.user import UserProfile
from expense_tracker.repositories.user_repository import UserRepository
from expense_tracker.services.base_service import BaseService


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_EMAIL_RE: re.Pattern[str] = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+$"
)

# C0 controls, DEL and C1 controls.
_CONTROL_CHAR_RE: re.Pattern[str] = re.compile(r"[\x00-\x1f\x7f-\x9f]")

_LOGIN_FALLBACK_MESSAGE: str = "Failed to login. Please try again."
_REGISTER_FALLBACK_MESSAGE: str = "Failed to register. Please try again."


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class AuthService(BaseService):
    """Centralised authentication service.

    Parameters
    ----------
    session:
        Injectable session holder; the only place the token and user
        are written.
    user_repo:
        Remote access to the auth and profile endpoints.
    logger:
        Structured JSON logger for audit-grade logging.
    """

    def __init__(
        self,
        session: SessionManager,
        user_repo: UserRepository,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(logger)
        self._session: SessionManager = session
        self._user_repo: UserRepository = user_repo

    # ==================================================================
    # Validation helpers
    # ==================================================================

    @staticmethod
    def validate_email(email: str) -> ValidationResult:
        """Validate an email address against a simplified RFC 5322 regex."""
        if not email or not email.strip():
            return ValidationResult(
                is_valid=False,
                error_message="Email address is required.",
            )
        if not _EMAIL_RE.match(email.strip()):
            return ValidationResult(
                is_valid=False,
                error_message="Please enter a valid email address.",
            )
        return ValidationResult(is_valid=True)

    @staticmethod
    def validate_password(password: str) -> ValidationResult:
        """Require a non-empty password.

        The password policy itself is enforced by the server; its
        message is shown when a password is rejected there.
        """
        if not password:
            return ValidationResult(
                is_valid=False,
                error_message="Password is required.",
            )
        return ValidationResult(is_valid=True)

    @staticmethod
    def validate_name(name: str, field_label: str) -> ValidationResult:
        """Validate a name field (first name or last name).

        Rejects control characters, including newlines and tabs, so a
        name cannot corrupt log lines or the display.

        Parameters
        ----------
        name:
            The raw name string.
        field_label:
            Human label for the error message (e.g. ``"First name"``).
        """
        stripped = name.strip()
        if not stripped:
            return ValidationResult(
                is_valid=False,
                error_message=f"{field_label} is required.",
            )
        if _CONTROL_CHAR_RE.search(stripped):
            return ValidationResult(
                is_valid=False,
                error_message=(
                    f"{field_label} contains invalid characters. "
                    "Only printable characters are allowed."
                ),
            )
        return ValidationResult(is_valid=True)

    @staticmethod
    def normalize_email(email: str) -> str:
        """Trim surrounding whitespace; the address is otherwise sent as typed."""
        return email.strip()

    # ==================================================================
    # Startup
    # ==================================================================

    async def initialize(self) -> Optional[UserProfile]:
        """Restore the persisted session and resolve its user.

        Returns the resolved user, or ``None`` when the client starts
        anonymous or the persisted token turned out to be invalid.
        """
        if self._session.restore() is None:
            return None
        return await self.resolve_current_user()

    async def resolve_current_user(self) -> Optional[UserProfile]:
        """Fetch the user for a held token whose user is not known yet.

        With no token this is a no-op returning ``None``; with a user
        already resolved it returns that user without a request.  Any
        failure ends the session; a 401 has already done so through the
        client, other errors mark it invalid and force a logout.
        """
        token = self._session.token
        if token is None:
            return None
        if self._session.current_user is not None:
            return self._session.current_user

        self._session.mark_resolving()
        try:
            user = await self._user_repo.get_current()
        except ApiError as exc:
            self._logger.warning(
                "Could not resolve the current user: %s", exc.message,
                extra={"event": "SESSION_RESOLVE_FAILED"},
            )
            # A 401 was already cleared by the client's invalidation, and a
            # token replaced mid-flight belongs to a newer session.
            if not isinstance(exc, Unauthorized) and self._session.token == token:
                self._session.mark_invalid()
                self.logout()
            return None

        if self._session.token != token:
            # Logged out or replaced while the lookup was in flight.
            self._logger.info("Session changed during user lookup; result discarded.")
            return self._session.current_user

        self._session.set_current_user(user)
        self._logger.info(
            "Session resolved for %s", user.display_name,
            extra={"event": "SESSION_RESOLVED", "user_id": user.id},
        )
        return user

    # ==================================================================
    # Login
    # ==================================================================

    async def login(self, email: str, password: str) -> AuthResult:
        """Authenticate against ``/api/auth/sign-in``.

        On success the token and user are stored together and the UI is
        sent to the dashboard.  On failure the session is left as it
        was; no partial token is ever stored.

        Parameters
        ----------
        email:
            The raw email entered by the user.
        password:
            The raw password entered by the user.
        """
        email_check = self.validate_email(email)
        if not email_check.is_valid:
            return self._validation_failure(email_check)
        pw_check = self.validate_password(password)
        if not pw_check.is_valid:
            return self._validation_failure(pw_check)

        email = self.normalize_email(email)

        try:
            auth = await self._user_repo.sign_in(email, password)
        except ApiError as exc:
            return self._classify_error(exc, "LOGIN_FAILED", _LOGIN_FALLBACK_MESSAGE)

        self._session.establish(auth.token, auth.user)
        self._logger.info(
            "User authenticated: %s", auth.user.display_name,
            extra={
                "event": "LOGIN",
                "email": auth.user.email,
                "user_id": auth.user.id,
            },
        )
        self._session.navigate(Route.DASHBOARD)
        return AuthResult(success=True, user=auth.user, redirect_to=Route.DASHBOARD)

    # ==================================================================
    # Registration
    # ==================================================================

    async def register(self, profile: RegisterProfile) -> AuthResult:
        """Create an account via ``/api/auth/sign-up`` and sign it in.

        Validates all fields client-side before calling the API.
        """
        for value, label in (
            (profile.first_name, "First name"),
            (profile.last_name, "Last name"),
        ):
            name_check = self.validate_name(value, label)
            if not name_check.is_valid:
                return self._validation_failure(name_check)

        email_check = self.validate_email(profile.email)
        if not email_check.is_valid:
            return self._validation_failure(email_check)
        pw_check = self.validate_password(profile.password)
        if not pw_check.is_valid:
            return self._validation_failure(pw_check)

        submitted = profile.model_copy(
            update={
                "first_name": profile.first_name.strip(),
                "last_name": profile.last_name.strip(),
                "email": self.normalize_email(profile.email),
            },
        )

        try:
            auth = await self._user_repo.sign_up(submitted)
        except ApiError as exc:
            return self._classify_error(exc, "REGISTER_FAILED", _REGISTER_FALLBACK_MESSAGE)

        self._session.establish(auth.token, auth.user)
        self._logger.info(
            "User registered: %s (%s).",
            auth.user.display_name,
            auth.user.email,
            extra={
                "event": "REGISTER",
                "email": auth.user.email,
                "user_id": auth.user.id,
            },
        )
        self._session.navigate(Route.DASHBOARD)
        return AuthResult(success=True, user=auth.user, redirect_to=Route.DASHBOARD)

    # ==================================================================
    # Logout
    # ==================================================================

    def logout(self) -> None:
        """Clear local session state and return to the entry route.

        The API has no sign-out endpoint; dropping the token is the
        whole logout.  Safe to call repeatedly.
        """
        user = self._session.current_user
        self._session.clear()
        self._logger.info(
            "User logged out: %s",
            user.email if user else "unknown",
            extra={
                "event": "LOGOUT",
                "user_id": user.id if user else "unknown",
            },
        )
        self._session.navigate(Route.ENTRY)

    # ==================================================================
    # Error classification
    # ==================================================================

    @staticmethod
    def _validation_failure(check: ValidationResult) -> AuthResult:
        return AuthResult(
            success=False,
            error_code=AuthErrorCode.VALIDATION_ERROR,
            error_message=check.error_message,
        )

    def _classify_error(
        self,
        exc: ApiError,
        event: str,
        fallback_message: str,
    ) -> AuthResult:
        """Map an ``ApiError`` from an auth endpoint to an ``AuthResult``.

        The server's envelope message wins over the per-status fallback.
        """
        if isinstance(exc, NetworkError):
            self._logger.warning(
                "Network error during auth: %s", exc.message,
                extra={"event": f"{event}_NETWORK"},
            )
            return AuthResult(
                success=False,
                error_code=AuthErrorCode.NETWORK_ERROR,
                error_message=exc.message,
            )

        status: Optional[int] = None
        if isinstance(exc, Unauthorized):
            status = 401
        elif isinstance(exc, RequestFailed):
            status = exc.status

        code, message = AuthErrorCode.UNKNOWN_ERROR, fallback_message
        if status is not None and status in AUTH_STATUS_MAP:
            code, message = AUTH_STATUS_MAP[status]

        self._logger.warning(
            "Auth error (%s, status %s): %s",
            code.value,
            status,
            exc.server_message or exc.message,
            extra={"event": event, "error_code": code.value},
        )
        return AuthResult(
            success=False,
            error_code=code,
            error_message=exc.server_message or message,
        )
