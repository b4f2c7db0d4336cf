"""Dialect strategies that rewrite a query to return one page of rows."""

from __future__ import annotations

import re
from typing import Any

import sqlalchemy as sa

from db_user_provider.domain.paging import PageRequest
from db_user_provider.domain.rdbms import Rdbms

_ORDER_BY = re.compile(r"\border\s+by\b", re.IGNORECASE)


class PagingDialect:
    """Base strategy; subclasses render the window clause for one engine.

    Offset and limit are rendered as integer literals so the positional
    placeholders of the base query keep their count and order. Strategies
    that wrap the query may add bookkeeping columns; they list them in
    ``helper_columns`` (lower case) so results can drop them.
    """

    name: str = "generic"
    helper_columns: frozenset[str] = frozenset()

    def paginate(self, query: str, page: PageRequest) -> str:
        """Return ``query`` restricted to the rows of ``page``."""

        return self.apply_window(_strip_terminator(query), page)

    def apply_window(self, query: str, page: PageRequest) -> str:
        raise NotImplementedError

    def strip_helper_columns(self, result: sa.CursorResult[Any]) -> sa.CursorResult[Any]:
        """Return ``result`` limited to the columns of the base query."""

        if not self.helper_columns:
            return result
        keys = list(result.keys())
        kept = [key for key in keys if key.lower() not in self.helper_columns]
        if len(kept) == len(keys):
            return result
        return result.columns(*kept)


class LimitOffsetDialect(PagingDialect):
    """``LIMIT n OFFSET m`` (PostgreSQL, SQLite, H2, HSQLDB)."""

    name = "limit_offset"

    def apply_window(self, query: str, page: PageRequest) -> str:
        return f"{query} LIMIT {page.limit} OFFSET {page.offset}"


class MySqlDialect(PagingDialect):
    """``LIMIT m, n`` (MySQL, MariaDB)."""

    name = "mysql"

    def apply_window(self, query: str, page: PageRequest) -> str:
        return f"{query} LIMIT {page.offset}, {page.limit}"


class OffsetFetchDialect(PagingDialect):
    """SQL:2008 ``OFFSET m ROWS FETCH NEXT n ROWS ONLY`` (Oracle 12c+, DB2)."""

    name = "offset_fetch"

    def apply_window(self, query: str, page: PageRequest) -> str:
        return f"{query} OFFSET {page.offset} ROWS FETCH NEXT {page.limit} ROWS ONLY"


class SqlServerDialect(OffsetFetchDialect):
    """SQL Server 2012+; ``OFFSET`` requires a top-level ``ORDER BY`` clause."""

    name = "sqlserver"

    def apply_window(self, query: str, page: PageRequest) -> str:
        if not has_top_level_order_by(query):
            query = f"{query} ORDER BY (SELECT NULL)"
        return super().apply_window(query, page)


class OracleRownumDialect(PagingDialect):
    """Pre-12c Oracle ``ROWNUM`` wrapping."""

    name = "oracle_rownum"
    helper_columns = frozenset({"rownum_"})

    def apply_window(self, query: str, page: PageRequest) -> str:
        return (
            "SELECT * FROM ("
            f"SELECT row_.*, ROWNUM rownum_ FROM ({query}) row_ WHERE ROWNUM <= {page.end}"
            f") WHERE rownum_ > {page.offset}"
        )


_DIALECTS: dict[Rdbms, PagingDialect] = {
    Rdbms.POSTGRESQL: LimitOffsetDialect(),
    Rdbms.SQLITE: LimitOffsetDialect(),
    Rdbms.H2: LimitOffsetDialect(),
    Rdbms.HSQLDB: LimitOffsetDialect(),
    Rdbms.MYSQL: MySqlDialect(),
    Rdbms.MARIADB: MySqlDialect(),
    Rdbms.ORACLE_12C: OffsetFetchDialect(),
    Rdbms.DB2: OffsetFetchDialect(),
    Rdbms.SQL_SERVER: SqlServerDialect(),
    Rdbms.ORACLE: OracleRownumDialect(),
}


def paging_dialect_for(rdbms: Rdbms) -> PagingDialect:
    """Return the paging strategy for one configured engine."""

    return _DIALECTS[rdbms]


def has_top_level_order_by(query: str) -> bool:
    """Return whether ``ORDER BY`` appears outside parentheses and literals."""

    return _ORDER_BY.search(_top_level_text(query)) is not None


def _top_level_text(query: str) -> str:
    # Nested and quoted text is blanked so only depth-0 keywords remain.
    chars: list[str] = []
    depth = 0
    quote: str | None = None
    for char in query:
        if quote is not None:
            if char == quote:
                quote = None
            chars.append(" ")
        elif char in ("'", '"', "["):
            quote = "]" if char == "[" else char
            chars.append(" ")
        elif char == "(":
            depth += 1
            chars.append(" ")
        elif char == ")":
            depth = max(depth - 1, 0)
            chars.append(" ")
        else:
            chars.append(char if depth == 0 else " ")
    return "".join(chars)


def _strip_terminator(query: str) -> str:
    return query.strip().rstrip(";").rstrip()
