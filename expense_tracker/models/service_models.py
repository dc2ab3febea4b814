"""
Service Layer Data Transfer Objects.

Response envelope and aggregate models exchanged between the API
client, the stores and the screens.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from expense_tracker.utils.value_codec import format_currency

__all__ = [
    "ApiEnvelope",
    "TransactionSummary",
]


class ApiEnvelope(BaseModel):
    """``{message?, data}`` wrapper around every API response."""

    model_config = ConfigDict(extra="ignore")

    message: Optional[str] = None
    data: Any = None

    def payload(self, key: str) -> Any:
        """Return ``data[key]``.

        Raises:
            KeyError: If ``data`` is not an object or lacks *key*.
        """
        if not isinstance(self.data, dict) or key not in self.data:
            raise KeyError(key)
        return self.data[key]


class TransactionSummary(BaseModel):
    """Dashboard totals, in minor units."""

    model_config = ConfigDict(frozen=True)

    total_income: int = 0
    total_expenses: int = 0

    @property
    def balance(self) -> int:
        return self.total_income - self.total_expenses

    def formatted(self) -> dict[str, str]:
        """Currency strings keyed like the dashboard cards."""
        return {
            "total_income": format_currency(self.total_income),
            "total_expenses": format_currency(self.total_expenses),
            "balance": format_currency(self.balance),
        }
