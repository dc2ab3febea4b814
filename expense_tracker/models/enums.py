"""
Shared Enumerations for Expense Tracker Models.

StrEnum values compare equal to their string equivalents, so wire
values like ``"EXPENSE"`` validate straight into the enum.
"""

from __future__ import annotations
from enum import StrEnum


class TransactionType(StrEnum):
    """Direction of a transaction.  Amounts are always positive."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class SessionStatus(StrEnum):
    """Lifecycle of the client session.

    ``INVALID`` is only observed between a failed resolution of a
    persisted token and the forced logout that follows it.
    """

    ANONYMOUS = "ANONYMOUS"
    RESOLVING = "RESOLVING"
    AUTHENTICATED = "AUTHENTICATED"
    INVALID = "INVALID"


class TypeFilter(StrEnum):
    """Dashboard tab selection."""

    ALL = "all"
    INCOME = "income"
    EXPENSE = "expense"


class Route(StrEnum):
    """Screens the session layer can navigate to."""

    ENTRY = "/"
    DASHBOARD = "/dashboard"
    CATEGORIES = "/categories"
