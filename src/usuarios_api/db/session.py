from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from usuarios_api.config import settings

# Naming conventions for database constraints.
# Alembic needs them to autogenerate stable constraint names.
NAMING_CONVENTION: dict[str, str] = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    Base.metadata tracks every registered table; the naming convention keeps
    constraint names predictable for migrations.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def engine_options(database_url: str) -> dict[str, Any]:
    """Engine keyword arguments for the given URL.

    Pool tuning and the asyncpg statement timeout only apply to server
    databases; SQLite gets SQLAlchemy's defaults. Bound parameters are kept
    out of error messages either way.
    """
    if database_url.startswith("sqlite"):
        return {"echo": settings.db_echo, "hide_parameters": True}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": settings.db_pool_recycle,
        "pool_pre_ping": settings.db_pool_pre_ping,
        "echo": settings.db_echo,
        "hide_parameters": True,
        "connect_args": {"command_timeout": settings.db_statement_timeout},
    }


engine = create_async_engine(settings.database_url, **engine_options(settings.database_url))

# expire_on_commit=False keeps objects usable after commit without re-querying,
# which would otherwise trigger implicit I/O outside the async context.
async_session = async_sessionmaker(engine, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that provides a database session per request.

    Commits on success, rolls back on exception. Services and repositories
    never call commit() or rollback() themselves.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def shutdown() -> None:
    """Close all pooled database connections on application shutdown."""
    await engine.dispose()
