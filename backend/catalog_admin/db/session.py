"""Async database engine and session factory."""

from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from catalog_admin.config import Settings, settings


def engine_options(config: Settings) -> Dict[str, Any]:
    """Keyword arguments for ``create_async_engine``.

    SQLite (tests, local runs) gets no pool tuning; it rejects pool_size and
    max_overflow.
    """
    options: Dict[str, Any] = {"echo": config.DB_ECHO}
    if not config.DATABASE_URL.startswith("sqlite"):
        options.update(
            pool_size=config.DB_POOL_SIZE,
            max_overflow=config.DB_MAX_OVERFLOW,
            pool_pre_ping=True,
        )
    return options


engine = create_async_engine(settings.DATABASE_URL, **engine_options(settings))

async_session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
