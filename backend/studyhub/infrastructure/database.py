"""Database Session Manager: async connection pool with automatic rollback and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Every session is closed on every exit path, returning its connection to the pool
    - All SQLAlchemy exceptions mapped to DatabaseError (core/errors.py)
    - Pool checkout is bounded by pool_timeout; exhaustion surfaces as DatabaseError
    - begin_write_locked() opens a transaction whose first read already
      excludes concurrent writers of the same row (PostgreSQL) or database (SQLite)

Design Decisions:
    - Single db_manager initialized in the FastAPI lifespan and disposed at shutdown
    - expire_on_commit=False: prevents lazy-load issues in async context
    - SQLite: the driver's implicit BEGIN is disabled and re-emitted from the
      "begin" event, so a transaction can ask for BEGIN IMMEDIATE through an
      execution option (SQLAlchemy's documented pysqlite/aiosqlite recipe)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)

from studyhub.core.errors import DatabaseError

logger = logging.getLogger(__name__)

BEGIN_IMMEDIATE_OPTION = "studyhub_begin_immediate"


def _install_sqlite_begin_hooks(engine: AsyncEngine) -> None:
    """Let transactions opt into BEGIN IMMEDIATE on SQLite."""

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        if conn.get_execution_options().get(BEGIN_IMMEDIATE_OPTION):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


# Most specific first: IntegrityError and OperationalError are DBAPIError subclasses
_FAILURE_KINDS = (
    (IntegrityError, "Integrity constraint violated", "commit", logging.ERROR),
    (PoolTimeoutError, "Connection pool exhausted", "connect", logging.WARNING),
    (OperationalError, "Connection or lock wait failed", "execute", logging.ERROR),
    (DBAPIError, "Database driver error", "query", logging.ERROR),
)


def _classify(exc: SQLAlchemyError) -> tuple[str, str, int]:
    for kind, message, operation, level in _FAILURE_KINDS:
        if isinstance(exc, kind):
            return message, operation, level
    return "Database operation failed", "unknown", logging.ERROR


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 10,
        max_overflow: int = 10,
        pool_timeout: float = 10.0,
        lock_timeout: float = 5.0,
    ):
        self.backend = make_url(database_url).get_backend_name()
        self.lock_timeout = lock_timeout
        if self.backend == "sqlite":
            self.engine = create_async_engine(
                database_url, connect_args={"timeout": lock_timeout},
            )
            _install_sqlite_begin_hooks(self.engine)
        else:
            self.engine = create_async_engine(
                database_url,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_pre_ping=True,
                pool_recycle=3600,
            )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session; roll back and translate SQLAlchemy failures on the way out."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            message, operation, level = _classify(e)
            logger.log(level, "DB %s failed: %s", operation, e)
            raise DatabaseError(message, operation) from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """SELECT 1 through a pooled session; False on any failure."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
        except (DatabaseError, OSError) as e:
            logger.error("DB health check failed: %s", e)
            return False
        return True

    async def close(self) -> None:
        await self.engine.dispose()


async def begin_write_locked(db: AsyncSession, lock_timeout: float) -> None:
    """Open the session's transaction for a serialized read-check-write unit.

    Must be called before the session has run any statement. On SQLite the
    transaction starts with BEGIN IMMEDIATE; on PostgreSQL the caller takes
    row locks with SELECT ... FOR UPDATE and waits at most lock_timeout.
    """
    if db.in_transaction():
        raise RuntimeError("begin_write_locked() needs a session with no open transaction")
    conn = await db.connection(execution_options={BEGIN_IMMEDIATE_OPTION: True})
    if conn.dialect.name == "postgresql":
        timeout_ms = max(1, int(lock_timeout * 1000))
        await conn.execute(text(f"SET LOCAL lock_timeout = '{timeout_ms}ms'"))


def upsert_insert(db: AsyncSession):
    """Dialect insert() that supports on_conflict_do_update for the session's bind."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return pg_insert
    if dialect == "sqlite":
        return sqlite_insert
    raise RuntimeError(f"Upsert not supported on {dialect}")


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def close_db() -> None:
    global db_manager
    if db_manager:
        await db_manager.close()
    db_manager = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
