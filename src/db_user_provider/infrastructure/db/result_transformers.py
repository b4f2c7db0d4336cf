"""Result transformers turning driver cursors into plain Python values."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime, time
from typing import Any, TypeVar

import sqlalchemy as sa

from db_user_provider.application.ports.user_repository_port import GenericRow

T = TypeVar("T")

ResultTransformer = Callable[[sa.CursorResult[Any]], T]

_TRUE_STRINGS = frozenset({"1", "t", "true", "y", "yes", "on"})


class ScalarReadError(LookupError):
    """Raised when a single-value query returns no rows."""


def read_rows(result: sa.CursorResult[Any]) -> list[GenericRow]:
    """Read all rows into label-to-text mappings.

    Column labels are captured once from the result metadata and reused for
    every row. SQL NULL becomes an empty string so each row carries exactly
    the returned columns.
    """

    columns = list(result.keys())
    return [
        {column: _to_text(value) for column, value in zip(columns, row, strict=True)}
        for row in result
    ]


def read_int(result: sa.CursorResult[Any]) -> int:
    """Read column 1 of the first row as an integer."""

    value = _read_first_value(result)
    if value is None:
        return 0
    return int(value)


def read_bool(result: sa.CursorResult[Any]) -> bool:
    """Read column 1 of the first row as a boolean."""

    value = _read_first_value(result)
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def read_string(result: sa.CursorResult[Any]) -> str | None:
    """Read column 1 of the first row as text; NULL stays None."""

    value = _read_first_value(result)
    if value is None:
        return None
    return _to_text(value)


def read_optional_string(result: sa.CursorResult[Any]) -> str | None:
    """Read column 1 of the first row as text, or None when no row matched."""

    row = result.fetchone()
    if row is None or row[0] is None:
        return None
    return _to_text(row[0])


def _read_first_value(result: sa.CursorResult[Any]) -> Any:
    row = result.fetchone()
    if row is None:
        raise ScalarReadError("query returned no rows where exactly one value was expected")
    return row[0]


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)
