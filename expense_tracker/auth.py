"""
Authentication & Session State.

Provides an injectable ``SessionManager`` that holds the bearer token,
the resolved ``UserProfile`` and the session status for the lifetime of
the client.  It is the sole mutator of that state; the login / register
/ logout flows live in ``AuthService`` and the ``ApiClient`` reaches it
only through :meth:`SessionManager.invalidate`.

Usage::

    from expense_tracker.auth import SessionManager
    from expense_tracker.token_store import MemoryTokenStore

    session = SessionManager(token_store=MemoryTokenStore(), logger=logger)
    session.establish(token, user)
    session.is_authenticated  # True
"""

from __future__ import annotations

from typing import Callable, Optional

from expense_tracker.logger import StructuredLogger
from expense_tracker.models.enums import Route, SessionStatus
from expense_tracker.models.user import UserProfile
from expense_tracker.token_store import TokenStore

Navigator = Callable[[Route], None]


class SessionManager:
    """Injectable holder for the token, the current user and the status.

    Invariants: a user is never held without a token, and the status is
    ``AUTHENTICATED`` exactly when both are set.  The token is written to
    the ``TokenStore`` whenever it is set and removed whenever it is
    cleared.

    Parameters
    ----------
    token_store:
        Persistence for the token across restarts.
    logger:
        Structured JSON logger.
    navigator:
        Called with the route the UI should show after a session
        transition.  Optional for headless use.
    """

    def __init__(
        self,
        token_store: TokenStore,
        logger: StructuredLogger,
        navigator: Optional[Navigator] = None,
    ) -> None:
        self._token_store: TokenStore = token_store
        self._logger: StructuredLogger = logger
        self._navigator: Optional[Navigator] = navigator
        self._token: Optional[str] = None
        self._current_user: Optional[UserProfile] = None
        self._status: SessionStatus = SessionStatus.ANONYMOUS

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def token(self) -> Optional[str]:
        """Return the bearer token, or ``None`` when anonymous."""
        return self._token

    @property
    def current_user(self) -> Optional[UserProfile]:
        return self._current_user

    def get_current_user(self) -> UserProfile:
        """Return the authenticated user.

        Raises:
            RuntimeError: If no user is currently resolved.
        """
        if self._current_user is None:
            raise RuntimeError("No user is currently authenticated. Login required.")
        return self._current_user

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def is_authenticated(self) -> bool:
        """``True`` when both a token and a user are held."""
        return self._status == SessionStatus.AUTHENTICATED

    @property
    def needs_resolution(self) -> bool:
        """``True`` when a token is held but its user is not known yet."""
        return self._token is not None and self._current_user is None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def restore(self) -> Optional[str]:
        """Load the persisted token at startup.

        With a token the session enters ``RESOLVING``; the user still has
        to be fetched.  The persisted token is the single source of truth
        here, any in-memory state is replaced.
        """
        token = self._token_store.load()
        self._current_user = None
        if token:
            self._token = token
            self._status = SessionStatus.RESOLVING
            self._logger.info("Persisted session token found; resolving user.")
        else:
            self._token = None
            self._status = SessionStatus.ANONYMOUS
        return self._token

    def establish(self, token: str, user: UserProfile) -> None:
        """Record a freshly issued token and its user in one step."""
        if not token:
            raise ValueError("Cannot establish a session without a token.")
        self._token = token
        self._current_user = user
        self._status = SessionStatus.AUTHENTICATED
        self._token_store.save(token)

    def mark_resolving(self) -> None:
        """Flag that the held token's user is being fetched."""
        if self._token is None:
            raise RuntimeError("Cannot resolve a user without a session token.")
        self._status = SessionStatus.RESOLVING

    def set_current_user(self, user: UserProfile) -> None:
        """Attach the resolved *user* to the held token.

        Raises:
            RuntimeError: If no token is held.
        """
        if self._token is None:
            raise RuntimeError("Cannot attach a user to a session without a token.")
        self._current_user = user
        self._status = SessionStatus.AUTHENTICATED

    def mark_invalid(self) -> None:
        """Flag the held token as unusable, pending the forced logout."""
        if self._token is not None:
            self._status = SessionStatus.INVALID

    def clear(self) -> None:
        """Remove the user and token, in memory and on disk."""
        self._token = None
        self._current_user = None
        self._status = SessionStatus.ANONYMOUS
        self._token_store.clear()

    def invalidate(self, reason: str = "unauthorized") -> None:
        """Global authorization-failure hook.

        Clears the session unconditionally and sends the UI to the entry
        route, whichever call discovered the failure.
        """
        had_session = self._token is not None
        user_id = self._current_user.id if self._current_user else "unknown"
        self.clear()
        self._logger.warning(
            "Session invalidated: %s",
            reason,
            extra={
                "event": "SESSION_INVALIDATED",
                "user_id": user_id,
                "had_session": had_session,
            },
        )
        self.navigate(Route.ENTRY)

    def navigate(self, route: Route) -> None:
        """Signal the UI to show *route*."""
        self._logger.debug("Navigate to %s", route.value)
        if self._navigator is not None:
            self._navigator(route)
