from __future__ import annotations

import json

import httpx
import pytest

from conftest import FakeBackend, transaction_json
from expense_tracker.api_client import ApiClient
from expense_tracker.auth import SessionManager
from expense_tracker.errors import (
    GENERIC_FAILURE_MESSAGE,
    NetworkError,
    RequestFailed,
    Unauthorized,
)
from expense_tracker.models.enums import Route, SessionStatus
from expense_tracker.token_store import MemoryTokenStore


async def test_anonymous_request_has_no_bearer_header(api: ApiClient, backend: FakeBackend) -> None:
    backend.route("GET", "/api/categories/", json={"data": {"categories": []}})

    await api.request("GET", "/api/categories/")

    assert "authorization" not in backend.requests[0].headers


async def test_bearer_header_attached_when_token_held(
    api: ApiClient, backend: FakeBackend, signed_in: SessionManager,
) -> None:
    backend.route("GET", "/api/categories/", json={"data": {"categories": []}})

    await api.request("GET", "/api/categories/")

    assert backend.requests[0].headers["authorization"] == "Bearer tok-1"


async def test_json_body_sets_content_type(api: ApiClient, backend: FakeBackend) -> None:
    backend.route("POST", "/api/categories/", json={"data": {}})

    await api.request("POST", "/api/categories/", json_body={"name": "Food"})

    sent = backend.requests[0]
    assert sent.headers["content-type"] == "application/json"
    assert json.loads(sent.content) == {"name": "Food"}


async def test_no_body_means_no_content_type(api: ApiClient, backend: FakeBackend) -> None:
    backend.route("DELETE", "/api/categories/c-1", json={"data": {}})

    await api.request("DELETE", "/api/categories/c-1")

    sent = backend.requests[0]
    assert sent.content == b""
    assert "content-type" not in sent.headers


async def test_falsy_params_are_dropped(api: ApiClient, backend: FakeBackend) -> None:
    backend.route("GET", "/api/transactions/", json={"data": {"transactions": []}})

    await api.request(
        "GET", "/api/transactions/",
        params={"page": 2, "limit": None, "categoryId": ""},
    )

    assert dict(backend.requests[0].url.params) == {"page": "2"}


async def test_success_returns_envelope_unchanged(api: ApiClient, backend: FakeBackend) -> None:
    body = {"message": "ok", "data": {"transactions": [transaction_json()]}}
    backend.route("GET", "/api/transactions/", json=body)

    envelope = await api.request("GET", "/api/transactions/")

    assert envelope.message == "ok"
    assert envelope.data == body["data"]


async def test_empty_success_body_is_empty_envelope(api: ApiClient, backend: FakeBackend) -> None:
    backend.route("DELETE", "/api/transactions/t-1", handler=lambda r: httpx.Response(204))

    envelope = await api.request("DELETE", "/api/transactions/t-1")

    assert envelope.message is None
    assert envelope.data is None


async def test_unreadable_success_body_fails(api: ApiClient, backend: FakeBackend) -> None:
    backend.route(
        "GET", "/api/categories/",
        handler=lambda r: httpx.Response(200, content=b"<html>oops</html>"),
    )

    with pytest.raises(RequestFailed) as info:
        await api.request("GET", "/api/categories/")
    assert info.value.status == 200


@pytest.mark.parametrize(
    "method, path",
    [
        ("GET", "/api/users/current"),
        ("GET", "/api/transactions/"),
        ("POST", "/api/categories/"),
        ("DELETE", "/api/transactions/t-9"),
    ],
)
async def test_401_invalidates_session_from_any_endpoint(
    api: ApiClient,
    backend: FakeBackend,
    signed_in: SessionManager,
    token_store: MemoryTokenStore,
    navigations: list[Route],
    method: str,
    path: str,
) -> None:
    backend.route(method, path, status=401, json={"message": "Invalid token"})

    with pytest.raises(Unauthorized) as info:
        await api.request(method, path)

    assert info.value.server_message == "Invalid token"
    assert signed_in.token is None
    assert signed_in.current_user is None
    assert signed_in.status == SessionStatus.ANONYMOUS
    assert token_store.load() is None
    assert navigations[-1] == Route.ENTRY


async def test_non_2xx_uses_server_message(api: ApiClient, backend: FakeBackend) -> None:
    backend.route("POST", "/api/categories/", status=409, json={"message": "Category exists"})

    with pytest.raises(RequestFailed) as info:
        await api.request("POST", "/api/categories/", json_body={"name": "Food"})

    assert info.value.status == 409
    assert info.value.message == "Category exists"


async def test_non_2xx_without_message_uses_generic_text(
    api: ApiClient, backend: FakeBackend,
) -> None:
    backend.route("GET", "/api/categories/", handler=lambda r: httpx.Response(500, content=b"boom"))

    with pytest.raises(RequestFailed) as info:
        await api.request("GET", "/api/categories/")

    assert info.value.status == 500
    assert info.value.message == GENERIC_FAILURE_MESSAGE


async def test_failure_does_not_touch_session(
    api: ApiClient, backend: FakeBackend, signed_in: SessionManager,
) -> None:
    backend.route("GET", "/api/transactions/", status=500, json={"message": "down"})

    with pytest.raises(RequestFailed):
        await api.request("GET", "/api/transactions/")

    assert signed_in.is_authenticated


async def test_transport_failure_is_network_error(api: ApiClient, backend: FakeBackend) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    backend.route("GET", "/api/categories/", handler=refuse)

    with pytest.raises(NetworkError) as info:
        await api.request("GET", "/api/categories/")

    assert info.value.message
    assert len(backend.requests) == 1


async def test_timeout_is_network_error(api: ApiClient, backend: FakeBackend) -> None:
    def slow(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    backend.route("GET", "/api/transactions/", handler=slow)

    with pytest.raises(NetworkError):
        await api.request("GET", "/api/transactions/")
