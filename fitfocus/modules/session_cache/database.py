"""Database engine factory for the structured session cache.

Uses SQLite by default; any SQLAlchemy URL is accepted.
"""

import logging
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def _resolve_db_url(db_url: str) -> str:
    """Expand ``~`` and create parent directories for file-backed SQLite."""
    prefix = "sqlite:///"
    if db_url.startswith(prefix) and db_url != "sqlite:///:memory:":
        db_path = Path(db_url[len(prefix):]).expanduser()
        db_path.parent.mkdir(parents=True, exist_ok=True)
        db_url = f"{prefix}{db_path}"
    return db_url


def get_engine(db_url: Optional[str] = None) -> Engine:
    """Get or create the SQLAlchemy engine.

    Args:
        db_url: Database URL. If None, uses the configured session cache URL.
    """
    global _engine
    if _engine is not None:
        return _engine

    if db_url is None:
        from fitfocus.modules.config import config_manager
        db_url = config_manager.app_settings.resolved_session_cache_db_url

    if db_url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection, otherwise every connection sees an empty database
        _engine = create_engine(
            db_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=False,
        )
    else:
        db_url = _resolve_db_url(db_url)
        _engine = create_engine(db_url, echo=False)

    logger.info("Session cache database engine created: %s", db_url.split("@")[-1] if "@" in db_url else db_url)
    return _engine


def get_session_factory(engine: Optional[Engine] = None) -> sessionmaker:
    """Get or create the session factory."""
    global _session_factory
    if _session_factory is not None:
        return _session_factory

    if engine is None:
        engine = get_engine()

    _session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    return _session_factory


def init_database(db_url: Optional[str] = None) -> Engine:
    """Initialize the database, creating tables if they don't exist."""
    engine = get_engine(db_url)
    Base.metadata.create_all(engine)
    logger.info("Session cache tables created/verified")
    return engine


def reset_engine():
    """Reset the global engine (for testing)."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None
