"""Offset/limit window requested over an ordered result set."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PageRequest:
    """Half-open row window ``[offset, offset + limit)``."""

    offset: int
    limit: int

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError("page offset cannot be negative")
        if self.limit <= 0:
            raise ValueError("page limit must be positive")

    @property
    def end(self) -> int:
        """Return the exclusive upper bound of the window."""

        return self.offset + self.limit
