"""
SnippetBox Backend — Database Session Management
==================================================

What:  The `Database` store handle (async engine + session factory), the ORM
       base class, and the per-request session dependency.
How:   `Database` is built once in the application lifespan and kept on
       `app.state.database`. Route dependencies open one session per request
       from it; nothing here is a module-level connection singleton.
Who:   Used by route handlers via FastAPI's dependency injection system,
       by tests (which build their own `Database` on a temp file), and by Alembic.

Connection Pooling:
    Server databases (PostgreSQL) get the configured pool:
    pool_size, max_overflow, pool_pre_ping, pool_recycle=3600.
    SQLite relies on SQLAlchemy's default pool for the aiosqlite driver and
    has foreign-key enforcement switched on for every new connection.
"""

import logging
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from snippetbox.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class so they share one metadata object,
    which both `Database.create_schema()` and Alembic read.
    """
    pass


# Integer primary/foreign keys are signed 64-bit on every supported backend
INTEGER_COLUMN_MIN = -(2**63)
INTEGER_COLUMN_MAX = 2**63 - 1


def fits_integer_column(value: int) -> bool:
    """True when `value` can be bound to an INTEGER column without overflowing the driver."""
    return INTEGER_COLUMN_MIN <= value <= INTEGER_COLUMN_MAX


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ships with FK enforcement off; ON DELETE CASCADE needs it on.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Store handle with an explicit lifecycle.

    Lifecycle:
        1. Constructed at process start (lifespan) or per test
        2. `create_schema()` when tables may be missing
        3. `session()` / `get_db_session` hands out sessions per request
        4. `dispose()` at shutdown closes every pooled connection
    """

    def __init__(self, url: str, echo: bool = False, **engine_options) -> None:
        self.url = url
        self.is_sqlite = make_url(url).get_backend_name() == "sqlite"
        if self.is_sqlite:
            self._ensure_sqlite_directory(url)
            engine_options = {}
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_options)
        if self.is_sqlite:
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        # expire_on_commit=False: attributes stay readable after a commit,
        # so responses can be built from objects written in the same request.
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "Database":
        """Build a store handle from application settings."""
        config = config or default_settings
        return cls(
            config.database_url,
            echo=config.log_level == "DEBUG",
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_pre_ping=config.db_pool_pre_ping,
            pool_recycle=3600,
        )

    @staticmethod
    def _ensure_sqlite_directory(url: str) -> None:
        database = make_url(url).database
        if database and database != ":memory:" and not database.startswith("file:"):
            Path(database).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)

    def session(self) -> AsyncSession:
        """Open a new session; use as `async with database.session() as s:`."""
        return self.session_factory()

    async def create_schema(self) -> None:
        """
        Create every table registered on `Base.metadata` that does not exist yet.

        Importing `snippetbox.models` registers all seven tables.
        """
        import snippetbox.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready (%s)", self.engine.url.render_as_string(hide_password=True))

    async def ping(self) -> bool:
        """Run `SELECT 1`; used by the health check."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def dispose(self) -> None:
        """Close all connections in the pool."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Opens a session from the `Database` on `app.state`
        2. Yields it to the route handler
        3. On success: commits whatever the handler left pending
        4. On error: rolls back, then re-raises for the exception handlers
        5. Always: closes the session (returns connection to pool)

    Repositories commit their own multi-step writes; the commit here only
    finalizes read transactions and any simple pending changes.
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
