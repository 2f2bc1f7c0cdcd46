"""Interfaces layer - protocols and contracts."""

from .events import EventLogger, LoggableEvent
from .sessions import LocalSessionPersistence, RemoteSessionService, SessionServices

__all__ = [
    "EventLogger",
    "LoggableEvent",
    "LocalSessionPersistence",
    "RemoteSessionService",
    "SessionServices",
]
