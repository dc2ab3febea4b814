"""
Transaction Store.

Local copy of the signed-in user's transactions.  Validates form input,
converts display values to wire values, calls the API through
``TransactionRepository`` and applies the server's answer to the
collection.  Newly created transactions are shown first.
"""

from __future__ import annotations

from typing import Optional

from expense_tracker.errors import ValidationError
from expense_tracker.logger import StructuredLogger
from expense_tracker.models.enums import TypeFilter
from expense_tracker.models.service_models import TransactionSummary
from expense_tracker.models.transaction import (
    Transaction,
    TransactionInput,
    TransactionPayload,
    TransactionQuery,
)
from expense_tracker.repositories.transaction_repository import TransactionRepository
from expense_tracker.services.kpi import compute_summary, filter_by_type
from expense_tracker.services.resource_store import BaseResourceStore
from expense_tracker.utils.value_codec import (
    from_wire_date,
    to_display_amount,
    to_minor_units,
    to_wire_date,
)


def validate_transaction_input(data: TransactionInput) -> TransactionPayload:
    """Check the form values and build the wire payload.

    Raises:
        ValidationError: With one message per offending field.  No
            request may be issued for input that fails here.
    """
    errors: dict[str, str] = {}

    description = data.description.strip()
    if not description:
        errors["description"] = "Description is required"

    amount_minor: Optional[int] = None
    if not data.amount.strip():
        errors["amount"] = "Amount is required"
    else:
        try:
            amount_minor = to_minor_units(data.amount)
        except ValueError:
            amount_minor = None
        if amount_minor is None or amount_minor <= 0:
            errors["amount"] = "Amount must be a positive number"

    if data.date is None:
        errors["date"] = "Date is required"

    if errors or amount_minor is None or data.date is None:
        raise ValidationError(errors)

    return TransactionPayload(
        description=description,
        amount_minor=amount_minor,
        type=data.type,
        category_id=data.category_id or None,
        date=to_wire_date(data.date),
    )


class TransactionStore(BaseResourceStore[Transaction]):
    """In-memory transaction collection synchronised with the API.

    Parameters
    ----------
    repo:
        Remote access to ``/api/transactions/``.
    logger:
        Structured JSON logger.
    """

    ENTITY_NAME = "transaction"

    def __init__(self, repo: TransactionRepository, logger: StructuredLogger) -> None:
        super().__init__(logger)
        self._repo: TransactionRepository = repo
        self._query: TransactionQuery = TransactionQuery()

    @property
    def query(self) -> TransactionQuery:
        """Filter of the most recently issued load."""
        return self._query

    async def load(self, query: Optional[TransactionQuery] = None) -> tuple[Transaction, ...]:
        """Fetch transactions and replace the local collection.

        With ``query.uncategorized`` the request carries no category
        filter and only transactions without a category are kept.
        """
        query = query or TransactionQuery()
        self._query = query
        seq = self._next_load_seq()

        try:
            fetched = await self._repo.get_all(query)
        except Exception:
            self._abandon_load(seq)
            raise
        if query.uncategorized:
            fetched = [tx for tx in fetched if tx.category_id is None]
        return self._replace_all_if_current(seq, fetched)

    async def create(self, data: TransactionInput) -> Transaction:
        payload = validate_transaction_input(data)
        created, envelope = await self._repo.create(payload)
        self._insert(created, prepend=True)
        self.last_message = envelope.message or "Transaction created successfully"
        self._logger.info(
            "Transaction created: %s", created.id,
            extra={"event": "TRANSACTION_CREATED", "transaction_id": created.id},
        )
        return created

    async def update(self, transaction_id: str, data: TransactionInput) -> Transaction:
        """PATCH *transaction_id* and swap in the server's version.

        An id not present locally is still sent; the collection is only
        touched when it holds that id.
        """
        payload = validate_transaction_input(data)
        updated, envelope = await self._repo.update(transaction_id, payload)
        if not self._replace(updated):
            self._logger.debug("Updated transaction %s is not loaded locally.", updated.id)
        self.last_message = envelope.message or "Transaction updated successfully"
        self._logger.info(
            "Transaction updated: %s", updated.id,
            extra={"event": "TRANSACTION_UPDATED", "transaction_id": updated.id},
        )
        return updated

    async def delete(self, transaction_id: str) -> None:
        envelope = await self._repo.delete(transaction_id)
        self._remove(transaction_id)
        self.last_message = envelope.message or "Transaction deleted successfully"
        self._logger.info(
            "Transaction deleted: %s", transaction_id,
            extra={"event": "TRANSACTION_DELETED", "transaction_id": transaction_id},
        )

    # ------------------------------------------------------------------
    # Dashboard views
    # ------------------------------------------------------------------

    def summary(self) -> TransactionSummary:
        return compute_summary(self._items)

    def by_type(self, type_filter: TypeFilter = TypeFilter.ALL) -> list[Transaction]:
        return filter_by_type(self._items, type_filter)

    def to_input(self, transaction: Transaction) -> TransactionInput:
        """Form values for editing *transaction*."""
        return TransactionInput(
            description=transaction.description,
            amount=to_display_amount(transaction.amount_minor),
            type=transaction.type,
            category_id=transaction.category_id,
            date=from_wire_date(transaction.date),
        )
