"""
Database connection and session management.
"""

from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)

from identity.core.config import settings


def _engine_options() -> dict[str, Any]:
    options: dict[str, Any] = {
        "echo": settings.database.echo,
        "pool_pre_ping": True,
    }
    if settings.database.is_postgres:
        options.update(
            pool_size=settings.database.pool_size,
            max_overflow=settings.database.pool_overflow,
            pool_timeout=settings.database.pool_timeout,
            pool_recycle=settings.database.pool_recycle,
        )
        if settings.database.command_timeout is not None:
            options["connect_args"] = {
                "command_timeout": settings.database.command_timeout,
            }
    return options


# Create async engine
engine = create_async_engine(settings.database.url, **_engine_options())

# Session factory
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db() -> None:
    """Initialize database (create tables)."""
    from .base import Base
    from . import user, feature_flag  # noqa: F401  register tables

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections."""
    await engine.dispose()
