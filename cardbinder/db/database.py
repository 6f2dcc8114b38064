"""
Local store engine and sessions.

The store is a single-user SQLite file by default. SQLite only enforces
foreign keys when asked to on each connection, so every engine built here
turns them on; an item can then never point at a deleted collection.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from cardbinder.config import settings
from cardbinder.models.db import Base


def _enable_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_store_engine(url: str, echo: bool = False) -> AsyncEngine:
    """
    Create the async engine for a store URL.

    SQLite connections get `PRAGMA foreign_keys=ON` as they are opened.
    """
    store_engine = create_async_engine(url, echo=echo, pool_pre_ping=True)
    if store_engine.dialect.name == "sqlite":
        event.listen(store_engine.sync_engine, "connect", _enable_foreign_keys)
    return store_engine


engine = create_store_engine(settings.database_url, echo=settings.debug)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; commits on success, rolls back on store errors."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            raise


async def init_db(store_engine: AsyncEngine | None = None) -> None:
    """Create any missing store tables. Safe to call on every startup."""
    async with (store_engine or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
