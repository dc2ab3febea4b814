"""
Base Repository.

Provides shared infrastructure for all repositories:
- ApiClient reference
- Logger reference
- Envelope payload extraction into pydantic models
"""

from __future__ import annotations

from typing import TypeVar
from urllib.parse import quote

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from expense_tracker.api_client import ApiClient
from expense_tracker.errors import ApiError
from expense_tracker.logger import StructuredLogger
from expense_tracker.models.service_models import ApiEnvelope

M = TypeVar("M", bound=BaseModel)

UNEXPECTED_RESPONSE_MESSAGE: str = "Unexpected response from the server."


class BaseRepository:
    """Base class for all repositories. Receives dependencies via __init__."""

    RESOURCE: str = ""

    def __init__(self, api: ApiClient, logger: StructuredLogger) -> None:
        self._api = api
        self._logger = logger

    @property
    def collection_path(self) -> str:
        """``/api/<resource>/`` (the trailing slash is part of the route)."""
        return f"/api/{self.RESOURCE}/"

    def item_path(self, entity_id: str) -> str:
        """``/api/<resource>/<id>`` with the id percent-encoded as one segment."""
        return f"/api/{self.RESOURCE}/{quote(entity_id, safe='')}"

    def _parse_data(self, envelope: ApiEnvelope, model: type[M]) -> M:
        """Validate the whole ``data`` object as *model*."""
        try:
            return model.model_validate(envelope.data)
        except PydanticValidationError as exc:
            self._logger.error("Malformed payload from %s: %s", self.RESOURCE, exc)
            raise ApiError(UNEXPECTED_RESPONSE_MESSAGE) from exc

    def _parse_one(self, envelope: ApiEnvelope, key: str, model: type[M]) -> M:
        """Validate ``data[key]`` as *model*.

        Raises:
            ApiError: When the payload is missing or does not match.
        """
        try:
            return model.model_validate(envelope.payload(key))
        except (KeyError, PydanticValidationError) as exc:
            self._logger.error(
                "Malformed '%s' payload from %s: %s", key, self.RESOURCE, exc,
            )
            raise ApiError(UNEXPECTED_RESPONSE_MESSAGE) from exc

    def _parse_many(self, envelope: ApiEnvelope, key: str, model: type[M]) -> list[M]:
        """Validate ``data[key]`` as a list of *model*."""
        try:
            raw = envelope.payload(key)
            if not isinstance(raw, list):
                raise TypeError(f"'{key}' is not a list")
            return [model.model_validate(item) for item in raw]
        except (KeyError, TypeError, PydanticValidationError) as exc:
            self._logger.error(
                "Malformed '%s' payload from %s: %s", key, self.RESOURCE, exc,
            )
            raise ApiError(UNEXPECTED_RESPONSE_MESSAGE) from exc
