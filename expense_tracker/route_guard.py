"""
Route Guard.

Decides which screen a path may show for the current session, and
provides a decorator factory for gating async callables behind a held
token.

Usage::

    from expense_tracker.route_guard import require_session, resolve_route

    resolve_route("/dashboard", session)  # Route.ENTRY when anonymous

    guard = require_session(session)

    @guard
    async def refresh_dashboard() -> None:
        ...
"""

from __future__ import annotations

from functools import wraps
from typing import Awaitable, Callable, ParamSpec, TypeVar

from expense_tracker.auth import SessionManager
from expense_tracker.models.enums import Route

P = ParamSpec("P")
R = TypeVar("R")

PROTECTED_ROUTES: frozenset[Route] = frozenset({Route.DASHBOARD, Route.CATEGORIES})


class AuthenticationError(RuntimeError):
    """Raised when a guarded function is called without a session token."""


def resolve_route(path: str, session: SessionManager) -> Route:
    """Map *path* to the route that should actually be shown.

    Unknown paths fall back to the entry route, as do protected routes
    while the session holds no token.  A token whose user is still
    being resolved is enough to stay on a protected route.
    """
    normalized = "/" + path.strip().strip("/") if path.strip("/ ") else "/"
    try:
        route = Route(normalized)
    except ValueError:
        return Route.ENTRY
    if route in PROTECTED_ROUTES and session.token is None:
        return Route.ENTRY
    return route


def require_session(
    session: SessionManager,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Return a decorator that refuses to run without a session token.

    Args:
        session: The injectable ``SessionManager`` holding the token.

    Returns:
        A decorator for async callables.
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            if session.token is None:
                raise AuthenticationError(
                    "Authentication required. Please log in before "
                    "performing this action."
                )
            return await func(*args, **kwargs)

        return wrapper

    return decorator
