"""
Session manager: owns the in-memory session list and the live subscription.

The manager loads the local cache at construction, mirrors every snapshot of
the remote live stream into memory and (in the background) into the cache,
and passes mutations straight through to the remote service. Mutations are
never applied optimistically; while listening, their effect shows up only
with the next stream snapshot.
"""

import asyncio
import logging
from typing import Callable, List, Optional, Set

from opentelemetry import trace

from fitfocus.application.sessions.events import SessionManagerEvent, SessionManagerEventKind
from fitfocus.core.log_sanitizer import sanitize_for_logging
from fitfocus.domain.sessions.models import BJJSession, SessionType
from fitfocus.interfaces.events import EventLogger
from fitfocus.interfaces.sessions import SessionServices

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

SessionsCallback = Callable[[List[BJJSession]], None]


class SessionManager:
    """
    Orchestrates local cache, remote service and live subscription.

    States:
    - Idle: no subscription task, list holds whatever was last loaded/received
    - Listening: exactly one subscription task bound to a user id

    Cache saves triggered by snapshots run as detached tasks. They are not
    ordered against later snapshots (last write wins in storage) and are not
    cancelled by ``stop_listening()``.
    """

    def __init__(self, services: SessionServices, event_logger: Optional[EventLogger] = None):
        self._remote = services.remote
        self._local = services.local
        self._event_logger = event_logger

        self._sessions: List[BJJSession] = self._local.get_sessions()
        self._listener_task: Optional[asyncio.Task] = None
        self._listening_user_id: Optional[str] = None
        self._save_tasks: Set[asyncio.Task] = set()
        self._subscribers: List[SessionsCallback] = []

        logger.info("SessionManager initialized with %d cached sessions", len(self._sessions))

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def sessions(self) -> List[BJJSession]:
        """Current in-memory sessions (a copy)."""
        return list(self._sessions)

    @property
    def is_listening(self) -> bool:
        return self._listener_task is not None and not self._listener_task.done()

    @property
    def listening_user_id(self) -> Optional[str]:
        return self._listening_user_id if self.is_listening else None

    def subscribe(self, callback: SessionsCallback) -> Callable[[], None]:
        """
        Register a callback invoked with the new list whenever it is replaced.

        Returns:
            A function that removes the callback
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _set_sessions(self, sessions: List[BJJSession]) -> None:
        self._sessions = sessions
        for callback in list(self._subscribers):
            try:
                callback(list(sessions))
            except Exception:
                logger.exception("Session subscriber %r raised", callback)

    def _track(self, event: SessionManagerEvent) -> None:
        if self._event_logger is not None:
            self._event_logger.track_event(event)

    # ------------------------------------------------------------------
    # Live subscription
    # ------------------------------------------------------------------
    def start_listening(self, user_id: str) -> None:
        """
        Start mirroring the user's remote sessions.

        Any existing subscription (for this or another user) is cancelled
        first. Must be called while an event loop is running.
        """
        self._track(SessionManagerEvent(SessionManagerEventKind.LISTENER_START))

        if self._listener_task is not None:
            self._listener_task.cancel()
        self._listening_user_id = user_id
        self._listener_task = asyncio.create_task(
            self._listen(user_id), name=f"bjj-sessions-listener-{user_id}"
        )
        logger.info("Started session listener for user %s", sanitize_for_logging(user_id))

    def stop_listening(self) -> None:
        """Cancel the subscription. The in-memory list is left as it is."""
        self._track(SessionManagerEvent(SessionManagerEventKind.LISTENER_STOP))

        if self._listener_task is not None:
            self._listener_task.cancel()
        self._listener_task = None
        self._listening_user_id = None
        logger.info("Stopped session listener")

    async def _listen(self, user_id: str) -> None:
        stream = self._remote.stream_sessions(user_id)
        try:
            async for snapshot in stream:
                if self._listener_task is not asyncio.current_task():
                    break
                self._set_sessions(list(snapshot))
                self._track(SessionManagerEvent.listener_success(len(snapshot)))
                self._save_sessions_locally()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # Not restarted; listening resumes only on the next start_listening()
            logger.warning(
                "Session stream for user %s failed: %s",
                sanitize_for_logging(user_id), e, exc_info=True,
            )
            self._track(SessionManagerEvent.listener_fail(e))
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()

    def _save_sessions_locally(self) -> None:
        self._track(SessionManagerEvent(SessionManagerEventKind.SAVE_LOCAL_START))

        snapshot = list(self._sessions)
        task = asyncio.create_task(self._save_local(snapshot))
        self._save_tasks.add(task)
        task.add_done_callback(self._save_tasks.discard)

    async def _save_local(self, sessions: List[BJJSession]) -> None:
        try:
            self._local.save_sessions(sessions)
        except Exception as e:
            logger.warning("Failed to save %d sessions locally: %s", len(sessions), e, exc_info=True)
            self._track(SessionManagerEvent.save_local_fail(e))
            return
        self._track(SessionManagerEvent(SessionManagerEventKind.SAVE_LOCAL_SUCCESS))

    async def wait_for_local_saves(self) -> None:
        """Wait until every background cache save started so far has finished."""
        if self._save_tasks:
            await asyncio.gather(*list(self._save_tasks))

    # ------------------------------------------------------------------
    # Mutations (remote pass-through)
    # ------------------------------------------------------------------
    async def create_session(self, session: BJJSession) -> None:
        self._track(SessionManagerEvent.create_start(session))
        with tracer.start_as_current_span("session_manager.create_session"):
            await self._remote.save_session(session)
        self._track(SessionManagerEvent.create_success(session))

    async def update_session_duration(self, session_id: str, duration: float) -> None:
        self._track(SessionManagerEvent(SessionManagerEventKind.UPDATE_DURATION_START))
        with tracer.start_as_current_span("session_manager.update_session_duration"):
            await self._remote.update_session_duration(session_id, duration)
        self._track(SessionManagerEvent(SessionManagerEventKind.UPDATE_DURATION_SUCCESS))

    async def update_session_rating(self, session_id: str, rating: int) -> None:
        self._track(SessionManagerEvent(SessionManagerEventKind.UPDATE_RATING_START))
        with tracer.start_as_current_span("session_manager.update_session_rating"):
            await self._remote.update_session_rating(session_id, rating)
        self._track(SessionManagerEvent(SessionManagerEventKind.UPDATE_RATING_SUCCESS))

    async def update_session_notes(self, session_id: str, notes: str) -> None:
        self._track(SessionManagerEvent(SessionManagerEventKind.UPDATE_NOTES_START))
        with tracer.start_as_current_span("session_manager.update_session_notes"):
            await self._remote.update_session_notes(session_id, notes)
        self._track(SessionManagerEvent(SessionManagerEventKind.UPDATE_NOTES_SUCCESS))

    async def update_session_type(self, session_id: str, session_type: SessionType) -> None:
        self._track(SessionManagerEvent(SessionManagerEventKind.UPDATE_TYPE_START))
        with tracer.start_as_current_span("session_manager.update_session_type"):
            await self._remote.update_session_type(session_id, session_type)
        self._track(SessionManagerEvent(SessionManagerEventKind.UPDATE_TYPE_SUCCESS))

    async def update_session_techniques(self, session_id: str, techniques: List[str]) -> None:
        self._track(SessionManagerEvent(SessionManagerEventKind.UPDATE_TECHNIQUES_START))
        with tracer.start_as_current_span("session_manager.update_session_techniques"):
            await self._remote.update_session_techniques(session_id, techniques)
        self._track(SessionManagerEvent(SessionManagerEventKind.UPDATE_TECHNIQUES_SUCCESS))

    async def delete_session(self, session_id: str) -> None:
        self._track(SessionManagerEvent(SessionManagerEventKind.DELETE_START))
        with tracer.start_as_current_span("session_manager.delete_session"):
            await self._remote.delete_session(session_id)
        self._track(SessionManagerEvent(SessionManagerEventKind.DELETE_SUCCESS))

    # ------------------------------------------------------------------
    # Reads (always remote)
    # ------------------------------------------------------------------
    async def get_session(self, session_id: str) -> BJJSession:
        return await self._remote.get_session(session_id)

    async def get_sessions(self, user_id: str) -> List[BJJSession]:
        return await self._remote.get_sessions(user_id)

    # ------------------------------------------------------------------
    # Local cache
    # ------------------------------------------------------------------
    def clear_local_sessions(self) -> None:
        """Clear the local cache and empty the in-memory list. Remote data is untouched."""
        self._track(SessionManagerEvent(SessionManagerEventKind.CLEAR_LOCAL_START))
        self._local.clear_sessions()
        self._set_sessions([])
        self._track(SessionManagerEvent(SessionManagerEventKind.CLEAR_LOCAL_SUCCESS))
