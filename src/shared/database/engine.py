from __future__ import annotations

from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
import structlog

from src.config import Settings

logger = structlog.get_logger(__name__)


def _engine_options(settings: Settings) -> Dict[str, Any]:
    url = make_url(settings.DATABASE_URL)
    options: Dict[str, Any] = {"echo": settings.SQLALCHEMY_ECHO, "pool_pre_ping": True}
    if url.get_backend_name() == "sqlite":
        # aiosqlite: default pool, no server settings
        return options
    options.update(
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=30,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )
    if url.get_driver_name() == "asyncpg":
        options["connect_args"] = {
            "server_settings": {
                "application_name": f"{settings.PROJECT_NAME}-{settings.ENVIRONMENT}",
                "statement_timeout": "30000",  # 30s
            }
        }
    return options


async def create_database_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine with pooling defaults taken from settings and run a smoke test.
    The caller owns the engine and must dispose it via close_database_engine().
    """
    engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings))

    # Smoke test
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection established", backend=engine.dialect.name)
    except Exception as e:
        logger.error("Failed to connect to database", error=str(e))
        await engine.dispose()
        raise

    return engine


async def close_database_engine(engine: AsyncEngine) -> None:
    await engine.dispose()
    logger.info("Database engine disposed")
