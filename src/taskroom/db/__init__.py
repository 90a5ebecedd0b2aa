"""Persistence layer: models, repositories and session management."""

from .session import close_db, get_db_session, get_session_manager, init_db

__all__ = [
    "close_db",
    "get_db_session",
    "get_session_manager",
    "init_db",
]
