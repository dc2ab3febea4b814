# tests/conftest.py
from __future__ import annotations

import inspect
import io
import logging
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, Union

import httpx
import pytest

from expense_tracker.api_client import ApiClient
from expense_tracker.auth import SessionManager
from expense_tracker.config import AppConfig
from expense_tracker.logger import StructuredLogger
from expense_tracker.models.enums import Route
from expense_tracker.models.user import UserProfile
from expense_tracker.token_store import MemoryTokenStore

API_URL = "https://api.test"

Responder = Callable[[httpx.Request], Union[httpx.Response, Awaitable[httpx.Response]]]


class FakeBackend:
    """In-process stand-in for the REST API, mounted via ``httpx.MockTransport``.

    Routes are keyed by ``(method, path)``; unknown routes answer 404.
    Every request that reaches the backend is recorded in ``requests``.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Responder] = {}

    def route(
        self,
        method: str,
        path: str,
        status: int = 200,
        json: Any = None,
        handler: Optional[Responder] = None,
    ) -> None:
        if handler is None:
            def handler(_request: httpx.Request) -> httpx.Response:
                return httpx.Response(status, json=json)
        self._routes[(method, path)] = handler

    def requests_to(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and r.url.path == path
        ]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self._routes.get((request.method, request.url.path))
        if responder is None:
            return httpx.Response(404, json={"message": "Not found"})
        result = responder(request)
        if inspect.isawaitable(result):
            result = await result
        return result


# ---------------------------------------------------------------------------
# Wire payload helpers
# ---------------------------------------------------------------------------

def user_json(**overrides: Any) -> dict[str, Any]:
    body = {
        "id": "u-1",
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "ada@example.com",
    }
    body.update(overrides)
    return body


def category_json(category_id: str = "c-1", name: str = "Food") -> dict[str, Any]:
    return {"id": category_id, "name": name, "createdAt": "2026-10-01T12:00:00.000Z"}


def transaction_json(
    transaction_id: str = "t-1",
    amount: int = 350,
    tx_type: str = "EXPENSE",
    category_id: Optional[str] = None,
    description: str = "Coffee",
    date: str = "2026-10-19T04:00:00.000Z",
) -> dict[str, Any]:
    return {
        "id": transaction_id,
        "description": description,
        "amount": amount,
        "type": tx_type,
        "categoryId": category_id,
        "date": date,
    }


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def log_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def logger(request: pytest.FixtureRequest, log_stream: io.StringIO) -> StructuredLogger:
    """JSON logger writing to an in-memory stream, no log file."""
    return StructuredLogger(
        name=f"tests.{request.node.nodeid}",
        level=logging.DEBUG,
        stream=log_stream,
        log_file="",
    )


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(API_URL=API_URL + "/", REQUEST_TIMEOUT_S=1.0, LOG_FILE="")


@pytest.fixture
def token_store() -> MemoryTokenStore:
    return MemoryTokenStore()


@pytest.fixture
def navigations() -> list[Route]:
    return []


@pytest.fixture
def session(
    token_store: MemoryTokenStore,
    logger: StructuredLogger,
    navigations: list[Route],
) -> SessionManager:
    return SessionManager(token_store=token_store, logger=logger, navigator=navigations.append)


@pytest.fixture
def signed_in(session: SessionManager) -> SessionManager:
    """The shared session, already holding a token and its user."""
    session.establish("tok-1", UserProfile.model_validate(user_json()))
    return session


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
async def api(
    config: AppConfig,
    session: SessionManager,
    logger: StructuredLogger,
    backend: FakeBackend,
) -> AsyncIterator[ApiClient]:
    client = ApiClient(
        config=config,
        session=session,
        logger=logger,
        transport=httpx.MockTransport(backend),
    )
    yield client
    await client.aclose()
