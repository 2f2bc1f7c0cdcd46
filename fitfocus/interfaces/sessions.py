"""Session storage and remote service interfaces."""

from typing import AsyncIterator, List, Protocol

from fitfocus.domain.sessions.models import BJJSession, SessionType


class LocalSessionPersistence(Protocol):
    """
    Port for the on-device cache of session records.

    Holds the last-known-good list of sessions. Implementations are
    interchangeable (JSON file, structured store, in-memory mock) and are
    selected at composition time.
    """

    def get_sessions(self) -> List[BJJSession]:
        """
        Return the last saved sessions.

        Returns:
            Saved sessions, or an empty list if nothing was saved or the
            stored data cannot be read. Never raises.
        """
        ...

    def save_sessions(self, sessions: List[BJJSession]) -> None:
        """
        Replace the stored sessions with ``sessions``.

        Args:
            sessions: Complete list to store

        Raises:
            StorageUnavailableError: If the location cannot be resolved or the write fails
        """
        ...

    def clear_sessions(self) -> None:
        """
        Remove all stored sessions.

        Raises:
            StorageUnavailableError: If storage is inaccessible
        """
        ...


class RemoteSessionService(Protocol):
    """
    Port for the cloud collection of session documents.

    Documents are keyed by ``session_id``. Queries filter on ``user_id`` and
    order by ``date`` descending.
    """

    async def get_session(self, session_id: str) -> BJJSession:
        """
        Fetch a single session.

        Raises:
            SessionNotFoundError: If no document has this id
        """
        ...

    async def get_sessions(self, user_id: str) -> List[BJJSession]:
        """Fetch all sessions for a user, most recent date first."""
        ...

    async def save_session(self, session: BJJSession) -> None:
        """Create or merge-overwrite the document for ``session.session_id``."""
        ...

    async def update_session_duration(self, session_id: str, duration: float) -> None:
        ...

    async def update_session_rating(self, session_id: str, rating: int) -> None:
        ...

    async def update_session_notes(self, session_id: str, notes: str) -> None:
        ...

    async def update_session_type(self, session_id: str, session_type: SessionType) -> None:
        ...

    async def update_session_techniques(self, session_id: str, techniques: List[str]) -> None:
        ...

    async def delete_session(self, session_id: str) -> None:
        ...

    def stream_sessions(self, user_id: str) -> AsyncIterator[List[BJJSession]]:
        """
        Live stream of a user's sessions.

        Every item is a complete snapshot, not a delta. The stream is
        unbounded until the consumer stops iterating, and may end by raising.
        """
        ...


class SessionServices(Protocol):
    """Bundle of the remote and local collaborators a SessionManager needs."""

    @property
    def remote(self) -> RemoteSessionService:
        ...

    @property
    def local(self) -> LocalSessionPersistence:
        ...
