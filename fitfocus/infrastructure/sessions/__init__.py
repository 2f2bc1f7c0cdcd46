"""Session cache and remote service adapters."""

from .file_persistence import FileSessionPersistence
from .in_memory_remote import InMemoryRemoteSessionService
from .mock_persistence import MockSessionPersistence
from .services import MockSessionServices, SessionServicesBundle

__all__ = [
    "FileSessionPersistence",
    "InMemoryRemoteSessionService",
    "MockSessionPersistence",
    "MockSessionServices",
    "SessionServicesBundle",
]
