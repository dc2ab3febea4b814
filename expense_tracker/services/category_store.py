"""
Category Store.

Local copy of the signed-in user's categories.  New categories are
appended.  Deleting a category does not remove transactions; the server
leaves them uncategorized and the transaction store sees that on its
next load.
"""

from __future__ import annotations

from typing import Optional

from expense_tracker.errors import ValidationError
from expense_tracker.logger import StructuredLogger
from expense_tracker.models.category import Category
from expense_tracker.repositories.category_repository import CategoryRepository
from expense_tracker.services.resource_store import BaseResourceStore


class CategoryStore(BaseResourceStore[Category]):
    """In-memory category collection synchronised with the API."""

    ENTITY_NAME = "category"

    def __init__(
        self,
        repo: CategoryRepository,
        logger: StructuredLogger,
        default_limit: Optional[int] = None,
    ) -> None:
        super().__init__(logger)
        self._repo: CategoryRepository = repo
        self._default_limit: Optional[int] = default_limit

    async def load(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> tuple[Category, ...]:
        """Fetch categories and replace the local collection.

        Without an explicit *limit* the configured default is sent, so
        the picker sees every category at once.
        """
        seq = self._next_load_seq()
        try:
            fetched = await self._repo.get_all(page=page, limit=limit or self._default_limit)
        except Exception:
            self._abandon_load(seq)
            raise
        return self._replace_all_if_current(seq, fetched)

    async def create(self, name: str) -> Category:
        """Create a category named *name* (trimmed).

        Raises:
            ValidationError: If the trimmed name is empty.
        """
        trimmed = name.strip()
        if not trimmed:
            raise ValidationError({"name": "Category name is required"})

        created, envelope = await self._repo.create(trimmed)
        self._insert(created)
        self.last_message = envelope.message or "Category created successfully"
        self._logger.info(
            "Category created: %s", created.name,
            extra={"event": "CATEGORY_CREATED", "category_id": created.id},
        )
        return created

    async def delete(self, category_id: str) -> None:
        envelope = await self._repo.delete(category_id)
        self._remove(category_id)
        self.last_message = envelope.message or "Category deleted successfully"
        self._logger.info(
            "Category deleted: %s", category_id,
            extra={"event": "CATEGORY_DELETED", "category_id": category_id},
        )

    def name_of(self, category_id: Optional[str]) -> Optional[str]:
        """Display name for *category_id*, ``None`` when unknown or unset."""
        if category_id is None:
            return None
        category = self.get(category_id)
        return category.name if category else None
