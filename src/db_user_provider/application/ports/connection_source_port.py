"""Port for borrowing pooled database connections."""

from __future__ import annotations

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncConnection


class ConnectionSourcePort(Protocol):
    """Connection source contract."""

    def acquire(self) -> AsyncConnection | None:
        """Return an unopened pooled connection, or None when unavailable."""
