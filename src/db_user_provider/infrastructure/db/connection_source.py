"""Async SQLAlchemy engine adapter for the connection source port."""

from __future__ import annotations

import logging

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from db_user_provider.application.ports.connection_source_port import ConnectionSourcePort
from db_user_provider.config.settings import Settings

logger = logging.getLogger(__name__)


class SqlAlchemyConnectionSource(ConnectionSourcePort):
    """Hand out connections from an engine pool when one is configured."""

    def __init__(self, engine: AsyncEngine | None) -> None:
        self._engine = engine

    @property
    def engine(self) -> AsyncEngine | None:
        return self._engine

    def acquire(self) -> AsyncConnection | None:
        if self._engine is None:
            return None
        return self._engine.connect()

    async def dispose(self) -> None:
        """Close pooled connections; later acquisitions return None."""

        engine = self._engine
        self._engine = None
        if engine is not None:
            await engine.dispose()


def create_connection_source(settings: Settings) -> SqlAlchemyConnectionSource:
    """Create a connection source for the configured database URL."""

    if settings.database_url is None:
        logger.warning("connection_source_unconfigured reason=missing_database_url")
        return SqlAlchemyConnectionSource(None)

    url = make_url(settings.database_url)
    engine_options: dict[str, object] = {"pool_pre_ping": settings.database_pool_pre_ping}
    if url.get_backend_name() != "sqlite":
        engine_options.update(
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_pool_max_overflow,
            pool_timeout=settings.database_pool_timeout_seconds,
        )

    logger.info(
        "connection_source_configured backend=%s rdbms=%s",
        url.get_backend_name(),
        settings.rdbms.value,
    )
    return SqlAlchemyConnectionSource(create_async_engine(url, **engine_options))
