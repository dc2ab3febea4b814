"""
Client Error Hierarchy.

``ValidationError`` is raised before any request is issued.  Everything
that happens on the wire surfaces as an ``ApiError`` subclass, each with
a user-facing ``message`` the calling screen can show as-is.
"""

from __future__ import annotations

from typing import Optional

GENERIC_FAILURE_MESSAGE: str = "Something went wrong"


class ValidationError(ValueError):
    """Local, field-scoped input rejection.

    ``field_errors`` maps a form field name (``"amount"``,
    ``"description"``...) to its message.
    """

    def __init__(self, field_errors: dict[str, str]) -> None:
        self.field_errors: dict[str, str] = dict(field_errors)
        super().__init__("; ".join(self.field_errors.values()) or "Invalid input")


class ApiError(Exception):
    """Base class for failures of a call to the remote API.

    ``server_message`` is the envelope ``message`` when the server sent
    one; ``message`` is always displayable.
    """

    def __init__(
        self,
        message: str = GENERIC_FAILURE_MESSAGE,
        server_message: Optional[str] = None,
    ) -> None:
        self.message: str = message
        self.server_message: Optional[str] = server_message
        super().__init__(message)


class Unauthorized(ApiError):
    """HTTP 401.  The session has already been invalidated when this is raised."""

    def __init__(
        self,
        message: str = "Session expired. Please log in again.",
        server_message: Optional[str] = None,
    ) -> None:
        super().__init__(message, server_message)


class RequestFailed(ApiError):
    """The server answered with a non-2xx status other than 401."""

    def __init__(self, status: int, message: Optional[str] = None) -> None:
        self.status: int = status
        super().__init__(message or GENERIC_FAILURE_MESSAGE, message)

    def __repr__(self) -> str:
        return f"RequestFailed(status={self.status}, message={self.message!r})"


class NetworkError(ApiError):
    """No response was received (connection refused, DNS, timeout...)."""

    def __init__(
        self,
        message: str = "Cannot reach the server. Check your internet connection.",
    ) -> None:
        super().__init__(message)
