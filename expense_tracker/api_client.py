"""
Remote API Client.

Single gateway to the Expense Tracker REST API.  Every request goes
through :meth:`ApiClient.request`, which

- attaches ``Authorization: Bearer <token>`` when the session holds one,
- sends a JSON body (and its content-type) only when one is given,
- turns HTTP 401 into a global session invalidation plus ``Unauthorized``,
- turns other non-2xx answers into ``RequestFailed`` and transport
  failures into ``NetworkError``,
- returns the parsed ``ApiEnvelope`` untouched on success.

No retries are performed; each call reaches the server at most once.

Usage::

    async with ApiClient(config=config, session=session, logger=logger) as api:
        envelope = await api.request("GET", "/api/categories/")
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from expense_tracker.auth import SessionManager
from expense_tracker.config import AppConfig
from expense_tracker.errors import (
    GENERIC_FAILURE_MESSAGE,
    NetworkError,
    RequestFailed,
    Unauthorized,
)
from expense_tracker.logger import StructuredLogger
from expense_tracker.models.service_models import ApiEnvelope


class ApiClient:
    """Authenticated request facade over ``httpx.AsyncClient``.

    Parameters
    ----------
    config:
        Provides ``API_URL`` and ``REQUEST_TIMEOUT_S``.
    session:
        Token source and owner of the invalidation hook.
    logger:
        Structured JSON logger.
    transport:
        Optional httpx transport (e.g. ``httpx.MockTransport``).
    """

    def __init__(
        self,
        config: AppConfig,
        session: SessionManager,
        logger: StructuredLogger,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._session: SessionManager = session
        self._logger: StructuredLogger = logger
        self._client: httpx.AsyncClient = httpx.AsyncClient(
            base_url=config.api_base_url,
            timeout=config.REQUEST_TIMEOUT_S,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def request(
        self,
        method: str,
        path: str,
        *,
        json_body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> ApiEnvelope:
        """Send one request and classify its outcome.

        Args:
            method: HTTP verb.
            path: Path relative to ``API_URL`` (``"/api/transactions/"``).
            json_body: JSON-serializable body; omitted entirely when ``None``.
            params: Query parameters; falsy values are dropped.

        Returns:
            The response envelope exactly as the server sent it.

        Raises:
            Unauthorized: HTTP 401; the session is already cleared.
            RequestFailed: Any other non-2xx status, or an unreadable
                2xx body.
            NetworkError: No response was received.
        """
        headers: dict[str, str] = {}
        token = self._session.token
        if token:
            headers["Authorization"] = f"Bearer {token}"

        query = {key: value for key, value in (params or {}).items() if value}

        kwargs: dict[str, Any] = {"headers": headers}
        if query:
            kwargs["params"] = query
        if json_body is not None:
            kwargs["json"] = json_body

        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            self._logger.warning(
                "Network error on %s %s: %s", method, path, exc,
                extra={"event": "API_NETWORK_ERROR"},
            )
            raise NetworkError() from exc

        if response.status_code == httpx.codes.UNAUTHORIZED:
            self._logger.warning(
                "401 from %s %s", method, path,
                extra={"event": "API_UNAUTHORIZED"},
            )
            self._session.invalidate(reason=f"401 from {method} {path}")
            envelope = self._parse_envelope(response)
            raise Unauthorized(server_message=envelope.message if envelope else None)

        envelope = self._parse_envelope(response)

        if not response.is_success:
            message = envelope.message if envelope is not None else None
            self._logger.warning(
                "%s %s failed with %d: %s",
                method,
                path,
                response.status_code,
                message or GENERIC_FAILURE_MESSAGE,
                extra={"event": "API_REQUEST_FAILED", "status": response.status_code},
            )
            raise RequestFailed(response.status_code, message)

        if envelope is None:
            self._logger.error(
                "Unreadable response body from %s %s (status %d).",
                method,
                path,
                response.status_code,
            )
            raise RequestFailed(response.status_code, "The server sent an unreadable response.")

        self._logger.debug("%s %s -> %d", method, path, response.status_code)
        return envelope

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_envelope(response: httpx.Response) -> Optional[ApiEnvelope]:
        """Parse the body as an envelope; ``None`` when it is not one.

        An empty body is a valid, empty envelope.
        """
        if not response.content.strip():
            return ApiEnvelope()
        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None
        if not isinstance(body, dict):
            return None
        try:
            return ApiEnvelope.model_validate(body)
        except PydanticValidationError:
            return None
