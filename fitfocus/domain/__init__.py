"""Domain layer - pure business models and logic."""

from .errors import (
    ConfigurationError,
    DomainError,
    RemoteServiceError,
    SessionDecodeError,
    SessionError,
    SessionNotFoundError,
    StorageError,
    StorageUnavailableError,
    ValidationError,
)
from .sessions.models import BJJSession, SessionType

__all__ = [
    # Errors
    "DomainError",
    "ValidationError",
    "ConfigurationError",
    "SessionError",
    "SessionNotFoundError",
    "SessionDecodeError",
    "StorageError",
    "StorageUnavailableError",
    "RemoteServiceError",
    # Sessions
    "BJJSession",
    "SessionType",
]
