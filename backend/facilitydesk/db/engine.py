"""Database engine, session factory, and base model.

Uses async SQLAlchemy with aiosqlite for local dev and asyncpg for the hosted
PostgreSQL store of record.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from facilitydesk.config import settings


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine tuned for the target dialect."""
    is_sqlite = url.startswith("sqlite")
    kwargs: dict = dict(echo=echo, future=True)
    if is_sqlite:
        kwargs["connect_args"] = {"timeout": 60, "check_same_thread": False}
        # One connection per session; with WAL, reads proceed while a write is open.
        kwargs["poolclass"] = NullPool
    else:
        kwargs["pool_size"] = 5
        kwargs["max_overflow"] = 10

    new_engine = create_async_engine(url, **kwargs)

    if is_sqlite:
        @event.listens_for(new_engine.sync_engine, "connect")
        def _set_sqlite_pragmas(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA busy_timeout=30000")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return new_engine


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)
async_session_factory = build_session_factory(engine)


async def init_db(bind: AsyncEngine | None = None, skip: tuple[str, ...] = ()) -> None:
    """Create missing tables (dev / first run). In production use Alembic.

    Tables named in ``skip`` are left alone, which is how tests model a
    backend without the optional ``case_comments`` table.
    """
    from sqlalchemy import inspect as sa_inspect

    from facilitydesk.db import models as _models  # noqa: F401

    async with (bind or engine).begin() as conn:
        def _create_missing(sync_conn):
            existing = set(sa_inspect(sync_conn).get_table_names())
            tables = [
                t for t in Base.metadata.sorted_tables
                if t.name not in existing and t.name not in skip
            ]
            Base.metadata.create_all(sync_conn, tables=tables)

        await conn.run_sync(_create_missing)


async def dispose_db() -> None:
    """Dispose of the engine on shutdown."""
    await engine.dispose()
