"""
SQLAlchemy async engine and session management

Provides:
1. Base: declarative base shared by every ORM model
2. Database: engine + session factory, injected through the DI container
3. create_db_and_tables: idempotent schema bootstrap used at startup and in tests
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from eventdesk.platform.config.core_setting import settings
from eventdesk.platform.logging.loguru_io import Logger


class Base(DeclarativeBase):
    pass


class Database:
    """
    Database handle for the dependency injection container

    The engine is created lazily so importing the container never opens a
    connection (the in-memory backend never touches it at all).
    """

    def __init__(self, *, url: Optional[str] = None, echo: bool = False) -> None:
        self._url = url or settings.DATABASE_URL
        self._echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            Logger.base.info(f'🔗 [DB] Creating engine for {self._url.split("@")[-1]}')
            self._engine = create_async_engine(self._url, echo=self._echo, **self._pool_options())
        return self._engine

    def _pool_options(self) -> dict[str, Any]:
        # SQLite drivers use a static / null pool which rejects sizing arguments
        if self._url.startswith('sqlite'):
            return {}
        return {
            'pool_size': settings.DB_POOL_SIZE,
            'max_overflow': settings.DB_MAX_OVERFLOW,
            'pool_recycle': settings.DB_POOL_RECYCLE,
            'pool_pre_ping': settings.DB_POOL_PRE_PING,
        }

    @property
    def session_maker(self) -> async_sessionmaker[AsyncSession]:
        if self._session_maker is None:
            self._session_maker = async_sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_maker

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Context manager for database sessions

        Note: Automatically handles rollback on exception
        """
        async with self.session_maker() as session:
            yield session

    async def create_db_and_tables(self) -> None:
        """Create database tables if they don't exist"""
        # Register every model on Base.metadata before create_all
        from eventdesk.service.booking.driven_adapter.model import (  # noqa: F401
            booking_model,
            ticket_model,
        )

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
        Logger.base.info('🗄️  [DB] Tables ensured')

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_maker = None
