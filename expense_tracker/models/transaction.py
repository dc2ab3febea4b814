"""
Transaction Models.

``Transaction`` is the server entity, ``TransactionInput`` holds the raw
form values a screen collects, and ``TransactionPayload`` is the wire
body produced from a validated input.  ``TransactionQuery`` describes a
load filter.
"""

from __future__ import annotations

from datetime import date as date_type
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from expense_tracker.models.category import Category
from expense_tracker.models.enums import TransactionType

_WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    coerce_numbers_to_str=True,
)


class Transaction(BaseModel):
    """Represents an income or expense record as returned by the server.

    The amount is a positive count of minor units (cents), carried as
    ``amount`` on the wire; the sign lives in ``type``.
    """

    model_config = ConfigDict(**_WIRE_CONFIG, frozen=True)

    id: str
    description: str
    amount_minor: int = Field(alias="amount", gt=0)
    type: TransactionType
    category_id: Optional[str] = None
    date: datetime
    category: Optional[Category] = None

    @model_validator(mode="before")
    @classmethod
    def _category_id_from_snapshot(cls, data: Any) -> Any:
        """Fill ``categoryId`` from the embedded category when omitted."""
        if isinstance(data, dict) and not data.get("categoryId") and not data.get("category_id"):
            category = data.get("category")
            if isinstance(category, dict) and category.get("id") is not None:
                data = {**data, "categoryId": category["id"]}
        return data

    @property
    def is_uncategorized(self) -> bool:
        return self.category_id is None and self.category is None


class TransactionInput(BaseModel):
    """Raw values from the transaction form, before validation.

    ``amount`` is the display string the user typed (``"3.50"``).
    """

    description: str = ""
    amount: str = ""
    type: TransactionType = TransactionType.EXPENSE
    category_id: Optional[str] = None
    date: Optional[date_type] = None


class TransactionPayload(BaseModel):
    """Create / update body in wire form."""

    model_config = _WIRE_CONFIG

    description: str
    amount_minor: int = Field(serialization_alias="amount", gt=0)
    type: TransactionType
    category_id: Optional[str] = None
    date: str

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class TransactionQuery(BaseModel):
    """Filter for a transaction load.

    ``category_id`` and ``uncategorized`` are mutually exclusive; with
    neither set every transaction is loaded.
    """

    page: Optional[int] = Field(default=None, ge=1)
    limit: Optional[int] = Field(default=None, ge=1)
    category_id: Optional[str] = None
    uncategorized: bool = False

    @model_validator(mode="after")
    def _exclusive_category_filter(self) -> "TransactionQuery":
        if self.category_id and self.uncategorized:
            raise ValueError(
                "category_id and uncategorized cannot be combined."
            )
        return self

    def to_params(self) -> dict[str, Any]:
        """Query-string parameters; unset values are left out."""
        params: dict[str, Any] = {}
        if self.page:
            params["page"] = self.page
        if self.limit:
            params["limit"] = self.limit
        if self.category_id:
            params["categoryId"] = self.category_id
        return params
