"""
Engine and session factory for the chunk and status stores.

Sessions are created with expire_on_commit=False so rows read inside a
store method stay usable after the transaction closes.

Dependencies: sqlalchemy, edu_rag.configs
System role: Database connection lifecycle management
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from edu_rag.boundary.db.base import Base
from edu_rag.configs import get_settings
from edu_rag.configs.database import DatabaseSettings


def get_async_engine(db_config: DatabaseSettings | None = None) -> AsyncEngine:
    """
    Build the async engine described by `db_config`.

    SQLite URLs get SQLAlchemy's default pool; server URLs get the
    configured pool with pre-ping enabled.

    Args:
        db_config: Database settings (application settings if None)

    Returns:
        AsyncEngine: Engine bound to the configured URL
    """
    db_config = db_config or get_settings().database
    pool_options = {}
    if not db_config.is_sqlite:
        pool_options = {
            "pool_size": db_config.pool_size,
            "max_overflow": db_config.max_overflow,
            "pool_timeout": db_config.pool_timeout,
            "pool_pre_ping": True,
        }
    return create_async_engine(db_config.async_database_url, echo=db_config.echo_sql, **pool_options)


def get_async_session_factory(engine: AsyncEngine | None = None) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine or get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create the documents and document_chunks tables when missing."""
    from edu_rag.boundary.db import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
