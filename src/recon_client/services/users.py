"""User and role management service."""

from __future__ import annotations

from typing import Any

from recon_client.client import ReconClient
from recon_client.decoding import unwrap_list
from recon_client.errors import DecodeError
from recon_client.models.users import Role, User, UserCreate, UserUpdate


class UserService:
    """Service for managing dashboard users."""

    def __init__(self, client: ReconClient) -> None:
        self._client = client
        self._paths = client.endpoints

    async def list_users(self) -> list[User]:
        """List all users."""
        data = await self._client.get(self._paths.users)
        try:
            return [User.model_validate(u) for u in unwrap_list(data, "users")]
        except (TypeError, ValueError) as e:
            raise DecodeError(f"Unexpected user listing: {e}") from e

    async def create_user(self, user: UserCreate) -> Any:
        """Create a user with the given role."""
        return await self._client.post(self._paths.users, json=user.model_dump(by_alias=True))

    async def update_user(self, user_id: int, update: UserUpdate) -> Any:
        """Update the fields set on ``update``."""
        body = update.model_dump(by_alias=True, exclude_none=True)
        if not body:
            raise ValueError("Nothing to update — set at least one field")
        return await self._client.put(f"{self._paths.users}/{user_id}", json=body)

    async def delete_user(self, user_id: int) -> Any:
        """Delete a user."""
        return await self._client.delete(f"{self._paths.users}/{user_id}")

    async def list_roles(self) -> list[Role]:
        """List the roles a user can be assigned."""
        data = await self._client.get(self._paths.roles)
        try:
            return [Role.model_validate(r) for r in unwrap_list(data, "roles")]
        except (TypeError, ValueError) as e:
            raise DecodeError(f"Unexpected role listing: {e}") from e
