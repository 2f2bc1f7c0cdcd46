"""Session synchronization application services."""

from .events import SessionManagerEvent, SessionManagerEventKind
from .manager import SessionManager

__all__ = [
    "SessionManager",
    "SessionManagerEvent",
    "SessionManagerEventKind",
]
