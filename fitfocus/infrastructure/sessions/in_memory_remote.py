"""In-process implementation of the remote session collection."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional, Tuple

from fitfocus.core.log_sanitizer import sanitize_for_logging
from fitfocus.domain.errors import SessionNotFoundError
from fitfocus.domain.sessions.models import BJJSession, SessionType

logger = logging.getLogger(__name__)

_STREAM_END = object()


class InMemoryRemoteSessionService:
    """
    Document collection of sessions kept in a dictionary.

    Mirrors the behaviour of a cloud document store closely enough for
    development and tests: documents are snake_case dicts keyed by
    ``session_id``, ``save_session`` merges into an existing document, partial
    updates stamp ``updated_at``, and each live stream emits a full snapshot
    on subscription and after every change touching its user.
    """

    def __init__(self, sessions: Optional[Iterable[BJJSession]] = None, collection_name: str = "bjj_sessions"):
        self.collection_name = collection_name
        self._documents: Dict[str, Dict[str, Any]] = {}
        self._subscribers: List[Tuple[str, asyncio.Queue]] = []
        for session in sessions or []:
            self._documents[session.session_id] = session.to_dict()

    @property
    def active_stream_count(self) -> int:
        return len(self._subscribers)

    def get_document(self, session_id: str) -> Optional[Dict[str, Any]]:
        """Raw stored document, for inspection in tests."""
        document = self._documents.get(session_id)
        return dict(document) if document is not None else None

    def _snapshot(self, user_id: str) -> List[BJJSession]:
        sessions = [
            BJJSession.from_dict(doc) for doc in self._documents.values() if doc["user_id"] == user_id
        ]
        sessions.sort(key=lambda s: s.date, reverse=True)
        return sessions

    def _publish(self, *user_ids: str) -> None:
        affected = set(user_ids)
        for user_id, queue in self._subscribers:
            if user_id in affected:
                queue.put_nowait(self._snapshot(user_id))

    def _require_document(self, session_id: str) -> Dict[str, Any]:
        document = self._documents.get(session_id)
        if document is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return document

    def _update_fields(self, session_id: str, fields: Dict[str, Any]) -> None:
        document = self._require_document(session_id)
        document.update(fields)
        document["updated_at"] = datetime.now(timezone.utc).isoformat()
        self._publish(document["user_id"])

    async def get_session(self, session_id: str) -> BJJSession:
        return BJJSession.from_dict(self._require_document(session_id))

    async def get_sessions(self, user_id: str) -> List[BJJSession]:
        return self._snapshot(user_id)

    async def save_session(self, session: BJJSession) -> None:
        incoming = session.to_dict()
        existing = self._documents.get(session.session_id)
        if existing is None:
            self._documents[session.session_id] = incoming
            self._publish(session.user_id)
            logger.info("Created session document %s", sanitize_for_logging(session.session_id))
            return

        previous_owner = existing["user_id"]
        # Merge write: absent (None) fields keep their stored value
        existing.update({k: v for k, v in incoming.items() if v is not None})
        self._publish(previous_owner, existing["user_id"])

    async def update_session_duration(self, session_id: str, duration: float) -> None:
        self._update_fields(session_id, {"duration": duration})

    async def update_session_rating(self, session_id: str, rating: int) -> None:
        self._update_fields(session_id, {"rating": rating})

    async def update_session_notes(self, session_id: str, notes: str) -> None:
        self._update_fields(session_id, {"notes": notes})

    async def update_session_type(self, session_id: str, session_type: SessionType) -> None:
        self._update_fields(session_id, {"session_type": SessionType(session_type).value})

    async def update_session_techniques(self, session_id: str, techniques: List[str]) -> None:
        self._update_fields(session_id, {"techniques": list(techniques)})

    async def delete_session(self, session_id: str) -> None:
        document = self._documents.pop(session_id, None)
        if document is not None:
            logger.info("Deleted session document %s", sanitize_for_logging(session_id))
            self._publish(document["user_id"])

    async def stream_sessions(self, user_id: str) -> AsyncIterator[List[BJJSession]]:
        queue: asyncio.Queue = asyncio.Queue()
        subscriber = (user_id, queue)
        self._subscribers.append(subscriber)
        try:
            yield self._snapshot(user_id)
            while True:
                item = await queue.get()
                if item is _STREAM_END:
                    return
                if isinstance(item, BaseException):
                    raise item
                yield item
        finally:
            self._subscribers.remove(subscriber)

    def fail_streams(self, error: BaseException) -> None:
        """Terminate every live stream with ``error``."""
        for _, queue in self._subscribers:
            queue.put_nowait(error)

    def finish_streams(self) -> None:
        """End every live stream normally."""
        for _, queue in self._subscribers:
            queue.put_nowait(_STREAM_END)
