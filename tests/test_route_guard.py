from __future__ import annotations

import pytest

from expense_tracker.auth import SessionManager
from expense_tracker.models.enums import Route
from expense_tracker.route_guard import AuthenticationError, require_session, resolve_route


@pytest.mark.parametrize("path", ["/dashboard", "/categories", "dashboard/"])
def test_protected_routes_redirect_anonymous_users(session: SessionManager, path: str) -> None:
    assert resolve_route(path, session) == Route.ENTRY


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/dashboard", Route.DASHBOARD),
        ("/categories/", Route.CATEGORIES),
        ("/", Route.ENTRY),
        ("", Route.ENTRY),
        ("/nowhere", Route.ENTRY),
    ],
)
def test_signed_in_routes(signed_in: SessionManager, path: str, expected: Route) -> None:
    assert resolve_route(path, signed_in) == expected


def test_token_without_resolved_user_is_enough(session: SessionManager, token_store) -> None:
    token_store.save("tok-1")
    session.restore()

    assert resolve_route("/dashboard", session) == Route.DASHBOARD


async def test_require_session_blocks_anonymous_calls(session: SessionManager) -> None:
    calls: list[int] = []

    @require_session(session)
    async def refresh(value: int) -> int:
        calls.append(value)
        return value * 2

    with pytest.raises(AuthenticationError):
        await refresh(1)
    assert calls == []


async def test_require_session_runs_with_token(signed_in: SessionManager) -> None:
    @require_session(signed_in)
    async def refresh(value: int) -> int:
        return value * 2

    assert await refresh(21) == 42
    assert refresh.__name__ == "refresh"
