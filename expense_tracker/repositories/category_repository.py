"""
Category Repository.

Maps the ``/api/categories/`` endpoints onto typed calls.  The API has
no category update endpoint.
"""

from __future__ import annotations

from typing import Optional

from expense_tracker.models.category import Category
from expense_tracker.models.service_models import ApiEnvelope
from expense_tracker.repositories.base_repository import BaseRepository


class CategoryRepository(BaseRepository):
    """Remote access to the signed-in user's categories."""

    RESOURCE = "categories"

    async def get_all(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[Category]:
        envelope = await self._api.request(
            "GET", self.collection_path, params={"page": page, "limit": limit},
        )
        return self._parse_many(envelope, "categories", Category)

    async def create(self, name: str) -> tuple[Category, ApiEnvelope]:
        envelope = await self._api.request(
            "POST", self.collection_path, json_body={"name": name},
        )
        return self._parse_one(envelope, "category", Category), envelope

    async def delete(self, category_id: str) -> ApiEnvelope:
        return await self._api.request("DELETE", self.item_path(category_id))
