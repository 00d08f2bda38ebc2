"""Async database manager for the deed registry."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from deed_registry.common.config import RegistrySettings, get_settings
from deed_registry.common.models import Base

# Import all model modules so Base.metadata is complete for create_all().
import deed_registry.lands.models  # noqa: F401
import deed_registry.owners.models  # noqa: F401
import deed_registry.deeds.models  # noqa: F401
import deed_registry.audit.models  # noqa: F401
import deed_registry.integrity.models  # noqa: F401


class DatabaseManager:
    """Manages a single async database engine.

    Every ``get_session()`` block is one transaction: it commits when the
    block exits normally and rolls back when anything inside it raises, so a
    multi-step workflow either lands completely or not at all.
    """

    def __init__(self, settings: RegistrySettings | None = None):
        self._settings = settings or get_settings()
        self.engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    async def init(self) -> None:
        url = self._settings.db_url
        self.engine = create_async_engine(url, echo=False)
        self._session_factory = async_sessionmaker(
            self.engine, expire_on_commit=False
        )

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        if self._session_factory is None:
            raise RuntimeError("DatabaseManager not initialized, call init() first")
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except BaseException:
                # BaseException so a cancelled request also rolls back
                await session.rollback()
                raise

    async def create_all(self) -> None:
        if self.engine is None:
            raise RuntimeError("DatabaseManager not initialized, call init() first")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self._session_factory = None
