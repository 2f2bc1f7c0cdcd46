"""In-memory implementation of the local session cache."""

from typing import List, Optional

from fitfocus.domain.sessions.models import BJJSession, mock_sessions


class MockSessionPersistence:
    """
    Holds the cached list in memory.

    Suitable for previews and tests. Nothing survives the process.
    """

    def __init__(self, sessions: Optional[List[BJJSession]] = None):
        self._sessions: List[BJJSession] = list(sessions) if sessions is not None else mock_sessions()

    def get_sessions(self) -> List[BJJSession]:
        return list(self._sessions)

    def save_sessions(self, sessions: List[BJJSession]) -> None:
        self._sessions = list(sessions)

    def clear_sessions(self) -> None:
        self._sessions = []
