"""
Database engine, session management, and base model class.

This module sets up SQLAlchemy 2.0 with async support. Key components:

  - build_engine(): Creates an async engine, applying the SQLite transaction
    hooks when the URL points at SQLite
  - engine: The application's async database engine
  - AsyncSessionLocal: Factory for creating async database sessions
  - Base: Declarative base class that all ORM models inherit from
  - get_db(): FastAPI dependency that provides a session per request
  - get_write_db(): Same, for requests that read and then write

SQLite transactions:
  pysqlite/aiosqlite manage BEGIN on their own and only start a transaction
  at the first write, which lets two transfers read the same balance before
  either one updates it. We take BEGIN away from the driver and emit it
  ourselves from the SQLAlchemy "begin" event:

    - Connections opened with the execution option SQLITE_BEGIN_IMMEDIATE
      (the account store's atomic units, get_write_db sessions) start
      with BEGIN IMMEDIATE, which takes the database write lock up front.
      A second transfer waits for the first to commit or roll back before
      it can read anything.
    - Every other transaction starts with a plain (deferred) BEGIN.

  The journal runs in WAL mode so that request sessions that only read
  (token lookup, balance checks) never block a transfer's commit.

  On PostgreSQL none of this applies: the account store locks the rows it
  reads with SELECT ... FOR UPDATE instead.

Session lifecycle:
  Each API request gets its own session via get_db() or get_write_db().
  The session commits on success and rolls back on exception. Routes that
  check something and then write (signup, profile update) use
  get_write_db(), whose transaction starts with BEGIN IMMEDIATE on SQLite.
  A deferred transaction that has already read cannot wait for the write
  lock; SQLite fails it at once with "database is locked" when another
  connection committed since its first read.
"""

from contextlib import asynccontextmanager

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from ledger.config import settings


# Execution option read by the "begin" hook below.
SQLITE_BEGIN_IMMEDIATE = "sqlite_begin_immediate"


def _install_sqlite_hooks(async_engine: AsyncEngine) -> None:
    sync_engine = async_engine.sync_engine

    @event.listens_for(sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Stop the driver from emitting BEGIN; the "begin" hook owns it now.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(sync_engine, "begin")
    def _on_begin(conn):
        if conn.get_execution_options().get(SQLITE_BEGIN_IMMEDIATE):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    SQLite engines get a busy timeout (how long a transaction waits for
    another one's write lock) and the transaction hooks described above.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["timeout"] = settings.SQLITE_BUSY_TIMEOUT_SECONDS

    async_engine = create_async_engine(
        database_url,
        echo=echo,
        connect_args=connect_args,
    )
    if async_engine.dialect.name == "sqlite":
        _install_sqlite_hooks(async_engine)
    return async_engine


# echo=True in debug mode logs all SQL statements
engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

# expire_on_commit=False prevents lazy-load errors after commit: accessing
# attributes on a committed object would otherwise trigger a synchronous
# DB call, which fails in async context.
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


@asynccontextmanager
async def session_scope(session_factory, write: bool = False):
    """
    Yield a session that commits on success and rolls back on any exception.

    With write=True the transaction is opened before the first query with
    SQLITE_BEGIN_IMMEDIATE set, so on SQLite it holds the write lock from
    its first read.
    """
    async with session_factory() as session:
        try:
            if write:
                await session.connection(
                    execution_options={SQLITE_BEGIN_IMMEDIATE: True}
                )
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_db():
    """
    FastAPI dependency that provides a database session.

    Usage in a route:
        @router.get("/items")
        async def list_items(db: AsyncSession = Depends(get_db)):
            ...

    The session is committed on success and rolled back on any exception,
    then closed when the request completes.
    """
    async with session_scope(AsyncSessionLocal) as session:
        yield session


async def get_write_db():
    """Like get_db, for routes that read and then write (signup, profile update)."""
    async with session_scope(AsyncSessionLocal, write=True) as session:
        yield session
