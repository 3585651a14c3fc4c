

from typing import AsyncGenerator, Type

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from todo_api.core.config import settings
from todo_api.core.errors import PersistenceError
from todo_api.db.base import Base


def enable_sqlite_foreign_keys(sync_engine: Engine) -> None:
    """SQLite ignores foreign keys (and their cascades) unless asked per connection."""

    @event.listens_for(sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Async database engine
engine = create_async_engine(settings.database_url, echo=False)
if engine.dialect.name == "sqlite":
    enable_sqlite_foreign_keys(engine.sync_engine)

# Async session factory
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency to get async database session.

    Yields an async database session and ensures it's closed after use.

    Yields:
        AsyncSession: Database session for the request lifespan.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def commit_or_rollback(
    db: AsyncSession,
    error_cls: Type[PersistenceError] = PersistenceError,
) -> None:
    """
    Commit the current transaction, rolling back on failure.

    Args:
        db: Database session.
        error_cls: PersistenceError subclass to raise on failure.

    Raises:
        PersistenceError: If the store rejects the transaction.
    """
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        raise error_cls(detail=str(e)) from e


async def init_db():
    """
    Initialize database and create all tables.

    Creates all tables defined in the models if they don't exist.
    Should be called during application startup.
    """
    # Register every model on the metadata before create_all
    from todo_api.models import category, tag, todo, todo_tag, user  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
