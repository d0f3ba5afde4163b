"""
Database connection and session management.
Uses SQLAlchemy 2.0 async pattern.

The engine lives on a ``Database`` object that the application factory
creates and disposes; nothing here is created at import time.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from projectninjas.logging_config import get_logger

logger = get_logger(__name__)


def _set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable WAL mode + foreign keys on every new SQLite connection."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.close()


class Database:
    """
    Owns the async engine and session factory.

    Usage:
        database = Database(settings.database_url)
        await database.create_all()
        async with database.session_maker() as session:
            ...
        await database.dispose()
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.is_sqlite = url.startswith("sqlite")
        self.engine: AsyncEngine = self._create_engine(url, echo)
        self.session_maker: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    def _create_engine(self, url: str, echo: bool) -> AsyncEngine:
        if self.is_sqlite:
            # NullPool: every session gets its own connection, avoiding
            # "cannot commit transaction - SQL statements in progress".
            engine = create_async_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=NullPool,
            )
            event.listen(engine.sync_engine, "connect", _set_sqlite_pragma)
            return engine

        return create_async_engine(
            url,
            echo=echo,
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=10,
        )

    async def create_all(self) -> None:
        """Create any missing tables."""
        from projectninjas.kernel.models import Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close pooled connections."""
        await self.engine.dispose()
        logger.info("Database connections closed")

