"""
Database package - async engine, sessions and schema setup
"""

from app.database.async_db import (
    dispose_async_engine,
    get_async_db,
    get_async_db_context,
    get_async_engine,
    get_session_factory,
)

__all__ = [
    "get_async_engine",
    "get_session_factory",
    "get_async_db",
    "get_async_db_context",
    "dispose_async_engine",
]
