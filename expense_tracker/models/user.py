"""
User Profile Model.

Immutable snapshot of the authenticated user, fetched once per session
from ``/api/users/current`` or returned by sign-in / sign-up.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class UserProfile(BaseModel):
    """Represents the signed-in account.

    ``first_name`` and ``last_name`` arrive as ``firstName`` /
    ``lastName`` on the wire.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        frozen=True,
    )

    id: str
    first_name: str = ""
    last_name: str = ""
    email: str

    @property
    def display_name(self) -> str:
        """``"First Last"`` as shown in the navigation bar."""
        return f"{self.first_name} {self.last_name}".strip()
