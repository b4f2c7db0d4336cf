"""Single-read query execution over a borrowed pooled connection."""

from __future__ import annotations

import logging
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError

from db_user_provider.application.ports.connection_source_port import ConnectionSourcePort
from db_user_provider.domain.paging import PageRequest
from db_user_provider.infrastructure.db.paging import PagingDialect
from db_user_provider.infrastructure.db.result_transformers import ResultTransformer

logger = logging.getLogger(__name__)

T = TypeVar("T")


class QueryExecutor:
    """Run configured SQL templates with positional parameters.

    Every call borrows one connection, runs one statement and closes its
    cursor before returning. Driver failures are logged and reported to the
    caller as None; callers cannot tell them apart from an empty result.
    """

    def __init__(
        self,
        *,
        connection_source: ConnectionSourcePort,
        paging_dialect: PagingDialect,
    ) -> None:
        self._connection_source = connection_source
        self._paging_dialect = paging_dialect

    async def execute(
        self,
        query: str,
        transformer: ResultTransformer[T],
        *params: object,
        page: PageRequest | None = None,
    ) -> T | None:
        """Execute one query and return the transformed cursor, or None."""

        connection = self._connection_source.acquire()
        if connection is None:
            logger.warning("query_skipped_no_connection")
            return None

        statement = query if page is None else self._paging_dialect.paginate(query, page)
        try:
            async with connection:
                result = await connection.exec_driver_sql(statement, tuple(params) or None)
                try:
                    if page is not None:
                        return transformer(self._paging_dialect.strip_helper_columns(result))
                    return transformer(result)
                finally:
                    result.close()
        except (SQLAlchemyError, OSError):
            logger.exception(
                "query_execution_failed statement=%s param_count=%s",
                statement,
                len(params),
            )
            return None
