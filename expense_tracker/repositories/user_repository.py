"""
User Repository.

Account endpoints: sign-in, sign-up and the current-user lookup.
"""

from __future__ import annotations

from expense_tracker.models.auth_models import AuthPayload, RegisterProfile
from expense_tracker.models.user import UserProfile
from expense_tracker.repositories.base_repository import BaseRepository


class UserRepository(BaseRepository):
    """Remote access to authentication and profile endpoints."""

    RESOURCE = "users"

    SIGN_IN_PATH: str = "/api/auth/sign-in"
    SIGN_UP_PATH: str = "/api/auth/sign-up"
    CURRENT_USER_PATH: str = "/api/users/current"

    async def sign_in(self, email: str, password: str) -> AuthPayload:
        envelope = await self._api.request(
            "POST", self.SIGN_IN_PATH, json_body={"email": email, "password": password},
        )
        return self._parse_data(envelope, AuthPayload)

    async def sign_up(self, profile: RegisterProfile) -> AuthPayload:
        envelope = await self._api.request(
            "POST", self.SIGN_UP_PATH, json_body=profile.model_dump(by_alias=True),
        )
        return self._parse_data(envelope, AuthPayload)

    async def get_current(self) -> UserProfile:
        envelope = await self._api.request("GET", self.CURRENT_USER_PATH)
        return self._parse_one(envelope, "user", UserProfile)
