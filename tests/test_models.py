from __future__ import annotations

import pydantic
import pytest

from conftest import category_json, transaction_json
from expense_tracker.config import AppConfig
from expense_tracker.models.enums import TransactionType, TypeFilter
from expense_tracker.models.service_models import ApiEnvelope
from expense_tracker.models.transaction import Transaction, TransactionQuery
from expense_tracker.services.kpi import compute_summary, filter_by_type


def test_transaction_reads_wire_names() -> None:
    tx = Transaction.model_validate(transaction_json(amount=1999, category_id="c-1"))

    assert tx.amount_minor == 1999
    assert tx.category_id == "c-1"
    assert tx.type == TransactionType.EXPENSE
    assert tx.date.tzinfo is not None


def test_transaction_takes_category_id_from_embedded_category() -> None:
    body = transaction_json()
    body["category"] = category_json("c-7", "Books")

    tx = Transaction.model_validate(body)

    assert tx.category_id == "c-7"
    assert tx.category is not None and tx.category.name == "Books"
    assert not tx.is_uncategorized


@pytest.mark.parametrize("amount", [0, -350])
def test_transaction_amount_must_be_positive(amount: int) -> None:
    with pytest.raises(pydantic.ValidationError):
        Transaction.model_validate(transaction_json(amount=amount))


def test_query_params_skip_unset_values() -> None:
    assert TransactionQuery().to_params() == {}
    assert TransactionQuery(page=3).to_params() == {"page": 3}
    assert TransactionQuery(uncategorized=True).to_params() == {}


def test_envelope_payload_lookup() -> None:
    envelope = ApiEnvelope.model_validate({"message": "ok", "data": {"user": {"id": "u"}}})

    assert envelope.payload("user") == {"id": "u"}
    with pytest.raises(KeyError):
        envelope.payload("transactions")
    with pytest.raises(KeyError):
        ApiEnvelope().payload("user")


def test_kpi_helpers() -> None:
    txs = [
        Transaction.model_validate(transaction_json("t-1", amount=5000, tx_type="INCOME")),
        Transaction.model_validate(transaction_json("t-2", amount=7500)),
    ]

    summary = compute_summary(txs)

    assert summary.balance == -2500
    assert summary.formatted() == {
        "total_income": "$50.00",
        "total_expenses": "$75.00",
        "balance": "-$25.00",
    }
    assert compute_summary([]).balance == 0
    assert [tx.id for tx in filter_by_type(txs, TypeFilter.INCOME)] == ["t-1"]


def test_config_strips_trailing_slash() -> None:
    config = AppConfig(API_URL="https://api.test/", LOG_FILE="")

    assert config.api_base_url == "https://api.test"
    assert config.TOKEN_STORAGE_KEY == "token"
