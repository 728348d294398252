from __future__ import annotations

from pathlib import Path
from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from report_portal.logger import logger


def _ensure_sqlite_dir(database_url: str) -> None:
    """Create the parent directory of a file-backed SQLite database"""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return
    database = url.database
    if database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)


class ReportDatabase:
    """Owns the async engine and session factory for one app instance.

    The engine is created lazily so that importing the app does not import
    database drivers.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    def _ensure_engine(self):
        if self._engine is None:
            # SQLite需要特殊配置
            connect_args = {}
            if self.database_url.startswith("sqlite"):
                connect_args = {"check_same_thread": False}
                _ensure_sqlite_dir(self.database_url)

            self._engine = create_async_engine(
                self.database_url,
                echo=self.echo,
                connect_args=connect_args,
            )
            self._session_factory = async_sessionmaker(
                self._engine, expire_on_commit=False, class_=AsyncSession
            )
        return self._engine, self._session_factory

    async def init_db(self) -> None:
        """Check connectivity and create tables if they do not exist.

        Raises whatever the driver raises when the database is unreachable;
        the app lifespan lets that abort startup.
        """
        from .models import Base

        engine, _ = self._ensure_engine()

        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            await conn.run_sync(Base.metadata.create_all)
        safe_url = make_url(self.database_url).render_as_string(hide_password=True)
        logger.info(f"Database initialized: {safe_url}")

    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        _, factory = self._ensure_engine()
        return factory

    async def dispose(self) -> None:
        """Dispose the engine (app shutdown)."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
