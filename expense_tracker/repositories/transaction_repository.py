"""
Transaction Repository.

Maps the ``/api/transactions/`` endpoints onto typed calls.
"""

from __future__ import annotations

from typing import Optional

from expense_tracker.models.service_models import ApiEnvelope
from expense_tracker.models.transaction import (
    Transaction,
    TransactionPayload,
    TransactionQuery,
)
from expense_tracker.repositories.base_repository import BaseRepository


class TransactionRepository(BaseRepository):
    """Remote access to the signed-in user's transactions."""

    RESOURCE = "transactions"

    async def get_all(self, query: Optional[TransactionQuery] = None) -> list[Transaction]:
        params = query.to_params() if query is not None else {}
        envelope = await self._api.request("GET", self.collection_path, params=params)
        return self._parse_many(envelope, "transactions", Transaction)

    async def create(self, payload: TransactionPayload) -> tuple[Transaction, ApiEnvelope]:
        """POST *payload*; returns the server's entity and the raw envelope."""
        envelope = await self._api.request(
            "POST", self.collection_path, json_body=payload.to_wire(),
        )
        return self._parse_one(envelope, "transaction", Transaction), envelope

    async def update(
        self,
        transaction_id: str,
        payload: TransactionPayload,
    ) -> tuple[Transaction, ApiEnvelope]:
        envelope = await self._api.request(
            "PATCH", self.item_path(transaction_id), json_body=payload.to_wire(),
        )
        return self._parse_one(envelope, "transaction", Transaction), envelope

    async def delete(self, transaction_id: str) -> ApiEnvelope:
        return await self._api.request("DELETE", self.item_path(transaction_id))
