"""Structured session cache using SQLAlchemy (SQLite by default)."""

from .database import get_engine, get_session_factory, init_database, reset_engine
from .models import Base, SessionRecord
from .persistence import SqlSessionPersistence

__all__ = [
    "get_engine",
    "get_session_factory",
    "init_database",
    "reset_engine",
    "Base",
    "SessionRecord",
    "SqlSessionPersistence",
]
