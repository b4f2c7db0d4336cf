"""Host-facing facade over user lookups and credential verification."""

from __future__ import annotations

from db_user_provider.application.ports.user_repository_port import GenericRow, UserRepositoryPort
from db_user_provider.application.services.credential_service import CredentialService


class UserProviderService:
    """Expose the read-only user directory operations to a host framework.

    Failed lookups are indistinguishable from "not found": the underlying
    executor logs database failures and returns empty results.
    """

    def __init__(self, *, users: UserRepositoryPort, credentials: CredentialService) -> None:
        self._users = users
        self._credentials = credentials

    async def list_all_users(self) -> list[GenericRow]:
        return await self._users.list_all_users()

    async def count_users(self) -> int:
        return await self._users.count_users()

    async def find_user_by_id(self, user_id: str) -> GenericRow | None:
        return await self._users.find_user_by_id(user_id=user_id)

    async def find_user_by_username(self, username: str) -> GenericRow | None:
        return await self._users.find_user_by_username(username=username)

    async def search_users(self, term: str | None) -> list[GenericRow]:
        return await self._users.search_users(term=term)

    async def list_users_paged(self, offset: int, limit: int) -> list[GenericRow]:
        return await self._users.list_users_paged(offset=offset, limit=limit)

    async def verify_credentials(self, username: str, password: str) -> bool:
        return await self._credentials.verify_credentials(username=username, password=password)

    async def update_credentials(self, username: str, password: str) -> bool:
        return await self._credentials.update_credentials(username=username, password=password)
