"""User lookups driven by externally configured SQL templates."""

from __future__ import annotations

import logging

from db_user_provider.application.ports.user_repository_port import GenericRow, UserRepositoryPort
from db_user_provider.config.settings import QueryConfigurations
from db_user_provider.domain.paging import PageRequest
from db_user_provider.infrastructure.db.query_executor import QueryExecutor
from db_user_provider.infrastructure.db.result_transformers import (
    read_int,
    read_optional_string,
    read_rows,
)

logger = logging.getLogger(__name__)

MIN_SEARCH_TERM_LENGTH = 2


class SqlQueryUserRepository(UserRepositoryPort):
    """User repository executing one configured template per operation."""

    def __init__(self, executor: QueryExecutor, queries: QueryConfigurations) -> None:
        self._executor = executor
        self._queries = queries

    async def list_all_users(self) -> list[GenericRow]:
        rows = await self._executor.execute(self._queries.list_all, read_rows)
        return rows or []

    async def count_users(self) -> int:
        count = await self._executor.execute(self._queries.count, read_int)
        return count or 0

    async def find_user_by_id(self, *, user_id: str) -> GenericRow | None:
        rows = await self._executor.execute(self._queries.find_by_id, read_rows, user_id)
        return _first(rows)

    async def find_user_by_username(self, *, username: str) -> GenericRow | None:
        rows = await self._executor.execute(self._queries.find_by_username, read_rows, username)
        return _first(rows)

    async def search_users(self, *, term: str | None) -> list[GenericRow]:
        """Return rows matching the term; terms under two characters are ignored."""

        if term is None or len(term) < MIN_SEARCH_TERM_LENGTH:
            logger.info(
                "user_search_ignored reason=term_too_short min_length=%s",
                MIN_SEARCH_TERM_LENGTH,
            )
            return []
        rows = await self._executor.execute(self._queries.find_by_search_term, read_rows, term)
        return rows or []

    async def list_users_paged(self, *, offset: int, limit: int) -> list[GenericRow]:
        page = PageRequest(offset=offset, limit=limit)
        rows = await self._executor.execute(self._queries.list_all, read_rows, page=page)
        return rows or []

    async def get_password_hash(self, *, username: str) -> str | None:
        return await self._executor.execute(
            self._queries.find_password_hash,
            read_optional_string,
            username,
        )


def _first(rows: list[GenericRow] | None) -> GenericRow | None:
    if not rows:
        return None
    return rows[0]
