"""
Category Model.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Category(BaseModel):
    """A user-owned label for transactions.

    Deleting a category never deletes its transactions; the server
    detaches them and they come back uncategorized on the next load.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        frozen=True,
    )

    id: str
    name: str
    created_at: Optional[datetime] = None
