"""
FitFocus - BJJ training log session synchronization.

Keeps a device-local cache of training sessions in step with a remote
document collection through a live per-user stream.

Example usage:
    from fitfocus import AppFactory, BJJSession

    factory = AppFactory()
    manager = factory.create_session_manager()
    manager.start_listening("user-123")
    await manager.create_session(BJJSession(user_id="user-123", duration=3600))
"""

from fitfocus.version import VERSION

__version__ = VERSION
__all__ = [
    "AppFactory",
    "BJJSession",
    "SessionManager",
    "SessionType",
    "VERSION",
    "__version__",
]


def __getattr__(name: str):
    """Lazy import to avoid loading SQLAlchemy and OpenTelemetry at module import time."""
    if name == "AppFactory":
        from fitfocus.infrastructure.app_factory import AppFactory
        globals()["AppFactory"] = AppFactory  # Cache for subsequent accesses
        return AppFactory
    if name == "SessionManager":
        from fitfocus.application.sessions.manager import SessionManager
        globals()["SessionManager"] = SessionManager
        return SessionManager
    if name in ("BJJSession", "SessionType"):
        from fitfocus.domain.sessions import models
        value = getattr(models, name)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
