from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from watchroom.config import settings
from watchroom.exceptions import StoreUnavailableException
from watchroom.utils.logging_config import database_logger


class Base(DeclarativeBase):
    pass


def _engine_options(url: str, echo: bool) -> dict:
    parsed = make_url(url)
    options: dict = {"echo": echo}
    if parsed.get_backend_name() == "sqlite":
        # In-memory SQLite lives on one connection; share it across sessions
        if parsed.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
            options["connect_args"] = {"check_same_thread": False}
        return options
    options.update(
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=settings.DB_POOL_PRE_PING,
    )
    return options


class Database:
    """
    Store client owning the engine and session factory.

    Construct one per process (or per test), call ``create_all()`` once,
    and ``close()`` on shutdown. Nothing connects at import time.
    """

    def __init__(self, url: str | None = None, echo: bool | None = None):
        self.url = url or settings.DATABASE_URL
        self.engine = create_async_engine(
            self.url,
            **_engine_options(self.url, settings.DEBUG if echo is None else echo),
        )
        self.sessionmaker = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def create_all(self) -> None:
        # Model modules must be imported so their tables are registered
        import watchroom.models  # noqa: F401

        database_logger.info("Initializing database...")
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (OperationalError, InterfaceError) as exc:
            raise StoreUnavailableException(str(exc.orig)) from exc
        database_logger.success("Database schema created/updated")

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (OperationalError, InterfaceError, OSError) as exc:
            database_logger.warning("Database ping failed", extra={"error": str(exc)})
            return False
        return True

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """One unit of work: commit on success, roll back on any error."""
        async with self.sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except (OperationalError, InterfaceError) as exc:
                await session.rollback()
                database_logger.error("Store unavailable", extra={"error": str(exc.orig)})
                raise StoreUnavailableException(str(exc.orig)) from exc
            except Exception:
                await session.rollback()
                raise

    async def close(self) -> None:
        await self.engine.dispose()
        database_logger.info("Database engine disposed")
