"""
Storefront Catalog - Database Session Management
==================================================

What:  Async SQLAlchemy engine, session factory, declarative base and the
       FastAPI session dependency.
How:   One engine with a connection pool per process; one session per
       request that commits on success and rolls back on error.
Who:   Route handlers receive sessions via Depends(get_db_session); the
       service layer only ever sees the session it is handed.

Transactions:
    The whole request runs inside one transaction. The review write path
    relies on this: the product existence check and the insert commit
    together when the request finishes.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from storefront.config import settings


def _engine_options(database_url: str) -> Dict[str, Any]:
    """
    Build create_async_engine() keyword arguments for the given URL.

    SQLite (used by the test suite and local experiments) does not accept
    the queue-pool sizing options, so they are only set for server databases.
    """
    options: Dict[str, Any] = {
        "echo": settings.log_level == "DEBUG",
    }
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


def build_engine(database_url: str) -> AsyncEngine:
    """Create an async engine configured from settings."""
    return create_async_engine(database_url, **_engine_options(database_url))


engine = build_engine(settings.database_url)

# expire_on_commit=False: response models read attributes after the
# dependency has committed
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all catalog ORM models (shared metadata for Alembic)."""
    pass


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global error handler
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/departments")
        async def list_departments(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def dispose_engine() -> None:
    """Close all pooled connections. Called from the app's shutdown hook."""
    await engine.dispose()
