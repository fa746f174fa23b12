from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.load_secrets import Settings
from src.models.schemas import Base


def _begin_immediate(engine: AsyncEngine) -> None:
    """Take SQLite's write lock when a transaction starts.

    Concurrent deferred transactions can fail with "database is locked" when both
    try to upgrade their read lock; immediate ones queue on the busy timeout.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for PostgreSQL (asyncpg) or SQLite (aiosqlite)."""
    if settings.database_url.startswith("sqlite"):
        engine = create_async_engine(url=settings.database_url, echo=False)
        _begin_immediate(engine)
        return engine
    return create_async_engine(settings.database_url, pool_size=20, max_overflow=20)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        autocommit=False,
        class_=AsyncSession,
        autoflush=True,
        expire_on_commit=False,
        bind=engine,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create tables if not exists"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
