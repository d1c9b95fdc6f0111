# This project was developed with assistance from AI tools.
"""Async engine, session factory, and FastAPI session dependency."""

import logging
import time
from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import db_settings

logger = logging.getLogger(__name__)

Base = declarative_base()

engine = create_async_engine(
    db_settings.DATABASE_URL,
    echo=db_settings.SQL_ECHO,
    pool_pre_ping=True,
    pool_size=db_settings.DB_POOL_SIZE,
    max_overflow=db_settings.DB_MAX_OVERFLOW,
    pool_recycle=db_settings.DB_POOL_RECYCLE_SECONDS,
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
)


class DatabaseService:
    """Connection health reporting for the API health endpoint."""

    def __init__(self, engine: AsyncEngine):
        self._engine = engine

    async def health_check(self) -> dict:
        """Run ``SELECT version()`` and report latency."""
        start = time.perf_counter()
        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(text("SELECT version()"))
                version = result.scalar() or ""
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Database health check failed: %s", exc)
            return {
                "name": "Database",
                "status": "unhealthy",
                "message": f"PostgreSQL unreachable: {exc.__class__.__name__}",
            }
        elapsed_ms = round((time.perf_counter() - start) * 1000, 1)
        return {
            "name": "Database",
            "status": "healthy",
            "message": f"{version.split(',')[0]} ({elapsed_ms} ms)",
        }


db_service = DatabaseService(engine=engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yield a session, roll back on error."""
    async with SessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def get_db_service() -> DatabaseService:
    return db_service
