"""Port for user lookup operations backed by configured SQL queries."""

from __future__ import annotations

from typing import Protocol

GenericRow = dict[str, str]


class UserRepositoryPort(Protocol):
    """User repository contract."""

    async def list_all_users(self) -> list[GenericRow]:
        """Return every user row, or an empty list when unavailable."""

    async def count_users(self) -> int:
        """Return the number of users, or 0 when unavailable."""

    async def find_user_by_id(self, *, user_id: str) -> GenericRow | None:
        """Return the first row matching the id or None."""

    async def find_user_by_username(self, *, username: str) -> GenericRow | None:
        """Return the first row matching the username or None."""

    async def search_users(self, *, term: str | None) -> list[GenericRow]:
        """Return rows matching the search term."""

    async def list_users_paged(self, *, offset: int, limit: int) -> list[GenericRow]:
        """Return one window of the list-all query."""

    async def get_password_hash(self, *, username: str) -> str | None:
        """Return the stored password hash for the username or None."""
