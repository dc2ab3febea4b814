from __future__ import annotations

import json

import pytest

from conftest import FakeBackend, category_json, transaction_json
from expense_tracker.api_client import ApiClient
from expense_tracker.auth import SessionManager
from expense_tracker.errors import RequestFailed, ValidationError
from expense_tracker.logger import StructuredLogger
from expense_tracker.models.transaction import TransactionQuery
from expense_tracker.repositories.category_repository import CategoryRepository
from expense_tracker.repositories.transaction_repository import TransactionRepository
from expense_tracker.services.category_store import CategoryStore
from expense_tracker.services.transaction_store import TransactionStore

COLLECTION = "/api/categories/"


@pytest.fixture
def store(api: ApiClient, signed_in: SessionManager, logger: StructuredLogger) -> CategoryStore:
    return CategoryStore(
        repo=CategoryRepository(api=api, logger=logger),
        logger=logger,
        default_limit=100000,
    )


async def test_load_uses_default_limit(store: CategoryStore, backend: FakeBackend) -> None:
    backend.route(
        "GET", COLLECTION,
        json={"data": {"categories": [category_json("c-1"), category_json("c-2", "Rent")]}},
    )

    items = await store.load()

    assert [c.name for c in items] == ["Food", "Rent"]
    assert dict(backend.requests[0].url.params) == {"limit": "100000"}
    assert store.name_of("c-2") == "Rent"
    assert store.name_of(None) is None
    assert store.name_of("missing") is None


async def test_create_trims_and_appends(store: CategoryStore, backend: FakeBackend) -> None:
    backend.route("GET", COLLECTION, json={"data": {"categories": [category_json("c-1")]}})
    await store.load()
    backend.route(
        "POST", COLLECTION,
        json={"message": "Category created", "data": {"category": category_json("c-2", "Travel")}},
    )

    created = await store.create("  Travel  ")

    sent = json.loads(backend.requests_to("POST", COLLECTION)[0].content)
    assert sent == {"name": "Travel"}
    assert created.id == "c-2"
    assert [c.id for c in store.items] == ["c-1", "c-2"]
    assert store.last_message == "Category created"


@pytest.mark.parametrize("name", ["", "   ", "\t"])
async def test_create_blank_name_sends_nothing(
    store: CategoryStore, backend: FakeBackend, name: str,
) -> None:
    with pytest.raises(ValidationError) as info:
        await store.create(name)

    assert info.value.field_errors == {"name": "Category name is required"}
    assert backend.requests == []


async def test_create_rejected_by_server(store: CategoryStore, backend: FakeBackend) -> None:
    backend.route("POST", COLLECTION, status=409, json={"message": "Category already exists"})

    with pytest.raises(RequestFailed) as info:
        await store.create("Food")

    assert info.value.message == "Category already exists"
    assert store.items == ()


async def test_delete_category_leaves_transactions_uncategorized(
    api: ApiClient,
    store: CategoryStore,
    backend: FakeBackend,
    logger: StructuredLogger,
) -> None:
    transactions = TransactionStore(repo=TransactionRepository(api=api, logger=logger), logger=logger)
    backend.route("GET", COLLECTION, json={"data": {"categories": [category_json("c-1")]}})
    backend.route(
        "GET", "/api/transactions/",
        json={"data": {"transactions": [transaction_json("t-1", category_id="c-1")]}},
    )
    await store.load()
    await transactions.load()

    backend.route("DELETE", f"{COLLECTION}c-1", json={"data": {}})
    await store.delete("c-1")

    # The server detaches the transaction; the next load shows it uncategorized.
    backend.route(
        "GET", "/api/transactions/",
        json={"data": {"transactions": [transaction_json("t-1", category_id=None)]}},
    )
    remaining = await transactions.load(TransactionQuery(uncategorized=True))

    assert store.items == ()
    assert [tx.id for tx in remaining] == ["t-1"]
    assert store.last_message == "Category deleted successfully"


async def test_clear_drops_items_and_pending_loads(
    store: CategoryStore, backend: FakeBackend,
) -> None:
    backend.route("GET", COLLECTION, json={"data": {"categories": [category_json("c-1")]}})
    await store.load()

    store.clear()

    assert store.items == ()
    assert len(store) == 0
