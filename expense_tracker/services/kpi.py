"""
KPI Helpers.

Dashboard metrics computed over a loaded transaction collection: income
and expense totals, the resulting balance, and the type tabs.  All
amounts are integer minor units; formatting is left to
``TransactionSummary.formatted``.
"""

from __future__ import annotations

from typing import Iterable

from expense_tracker.models.enums import TransactionType, TypeFilter
from expense_tracker.models.service_models import TransactionSummary
from expense_tracker.models.transaction import Transaction


def compute_summary(transactions: Iterable[Transaction]) -> TransactionSummary:
    """Sum income and expenses of *transactions*."""
    total_income = 0
    total_expenses = 0
    for tx in transactions:
        if tx.type == TransactionType.INCOME:
            total_income += tx.amount_minor
        else:
            total_expenses += tx.amount_minor
    return TransactionSummary(total_income=total_income, total_expenses=total_expenses)


def filter_by_type(
    transactions: Iterable[Transaction],
    type_filter: TypeFilter = TypeFilter.ALL,
) -> list[Transaction]:
    """Keep the transactions shown under the *type_filter* tab, in order."""
    if type_filter == TypeFilter.ALL:
        return list(transactions)
    wanted = (
        TransactionType.INCOME
        if type_filter == TypeFilter.INCOME
        else TransactionType.EXPENSE
    )
    return [tx for tx in transactions if tx.type == wanted]
