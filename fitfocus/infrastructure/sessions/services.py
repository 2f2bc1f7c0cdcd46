"""Ready-made SessionServices bundles."""

from dataclasses import dataclass
from typing import List, Optional

from fitfocus.domain.sessions.models import BJJSession, mock_sessions
from fitfocus.interfaces.sessions import LocalSessionPersistence, RemoteSessionService

from .in_memory_remote import InMemoryRemoteSessionService
from .mock_persistence import MockSessionPersistence


@dataclass(frozen=True)
class SessionServicesBundle:
    """A remote service and local cache chosen at composition time."""
    remote: RemoteSessionService
    local: LocalSessionPersistence


class MockSessionServices:
    """In-process remote and in-memory cache, both seeded with the same sessions."""

    def __init__(self, sessions: Optional[List[BJJSession]] = None):
        seed = list(sessions) if sessions is not None else mock_sessions()
        self.remote = InMemoryRemoteSessionService(seed)
        self.local = MockSessionPersistence(seed)
