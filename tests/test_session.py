from __future__ import annotations

import pytest

from conftest import user_json
from expense_tracker.auth import SessionManager
from expense_tracker.models.enums import Route, SessionStatus
from expense_tracker.models.user import UserProfile
from expense_tracker.token_store import MemoryTokenStore


@pytest.fixture
def user() -> UserProfile:
    return UserProfile.model_validate(user_json())


def test_starts_anonymous(session: SessionManager) -> None:
    assert session.status == SessionStatus.ANONYMOUS
    assert session.token is None
    assert not session.is_authenticated
    with pytest.raises(RuntimeError):
        session.get_current_user()


def test_establish_persists_token(
    session: SessionManager, token_store: MemoryTokenStore, user: UserProfile,
) -> None:
    session.establish("tok-1", user)

    assert session.is_authenticated
    assert session.get_current_user().display_name == "Ada Lovelace"
    assert token_store.load() == "tok-1"


def test_establish_requires_token(session: SessionManager, user: UserProfile) -> None:
    with pytest.raises(ValueError):
        session.establish("", user)
    assert session.status == SessionStatus.ANONYMOUS


def test_user_never_held_without_token(session: SessionManager, user: UserProfile) -> None:
    with pytest.raises(RuntimeError):
        session.set_current_user(user)
    assert session.current_user is None


def test_restore_replaces_memory_state(
    session: SessionManager, token_store: MemoryTokenStore, user: UserProfile,
) -> None:
    session.establish("tok-1", user)
    token_store.save("tok-disk")

    assert session.restore() == "tok-disk"
    assert session.current_user is None
    assert session.status == SessionStatus.RESOLVING


def test_invalidate_clears_and_navigates(
    signed_in: SessionManager,
    token_store: MemoryTokenStore,
    navigations: list[Route],
    log_stream,
) -> None:
    signed_in.invalidate(reason="401 from GET /api/transactions/")

    assert signed_in.status == SessionStatus.ANONYMOUS
    assert token_store.load() is None
    assert navigations == [Route.ENTRY]
    assert "SESSION_INVALIDATED" in log_stream.getvalue()


def test_mark_invalid_needs_a_token(session: SessionManager) -> None:
    session.mark_invalid()
    assert session.status == SessionStatus.ANONYMOUS
