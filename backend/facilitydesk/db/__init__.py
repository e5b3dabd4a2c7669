"""Database package."""

from .engine import (
    Base,
    async_session_factory,
    build_engine,
    build_session_factory,
    dispose_db,
    engine,
    init_db,
)

__all__ = [
    "Base",
    "async_session_factory",
    "build_engine",
    "build_session_factory",
    "dispose_db",
    "engine",
    "init_db",
]
