"""Loggable events emitted by the SessionManager."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from fitfocus.domain.errors import DomainError
from fitfocus.domain.sessions.models import BJJSession

LOG_TYPE_ANALYTIC = "analytic"
LOG_TYPE_SEVERE = "severe"


class SessionManagerEventKind(str, Enum):
    LISTENER_START = "BJJSessionMan_Listener_Start"
    LISTENER_SUCCESS = "BJJSessionMan_Listener_Success"
    LISTENER_FAIL = "BJJSessionMan_Listener_Fail"
    LISTENER_STOP = "BJJSessionMan_Listener_Stop"
    SAVE_LOCAL_START = "BJJSessionMan_SaveLocal_Start"
    SAVE_LOCAL_SUCCESS = "BJJSessionMan_SaveLocal_Success"
    SAVE_LOCAL_FAIL = "BJJSessionMan_SaveLocal_Fail"
    CREATE_START = "BJJSessionMan_Create_Start"
    CREATE_SUCCESS = "BJJSessionMan_Create_Success"
    UPDATE_DURATION_START = "BJJSessionMan_UpdateDuration_Start"
    UPDATE_DURATION_SUCCESS = "BJJSessionMan_UpdateDuration_Success"
    UPDATE_RATING_START = "BJJSessionMan_UpdateRating_Start"
    UPDATE_RATING_SUCCESS = "BJJSessionMan_UpdateRating_Success"
    UPDATE_NOTES_START = "BJJSessionMan_UpdateNotes_Start"
    UPDATE_NOTES_SUCCESS = "BJJSessionMan_UpdateNotes_Success"
    UPDATE_TYPE_START = "BJJSessionMan_UpdateType_Start"
    UPDATE_TYPE_SUCCESS = "BJJSessionMan_UpdateType_Success"
    UPDATE_TECHNIQUES_START = "BJJSessionMan_UpdateTechniques_Start"
    UPDATE_TECHNIQUES_SUCCESS = "BJJSessionMan_UpdateTechniques_Success"
    DELETE_START = "BJJSessionMan_Delete_Start"
    DELETE_SUCCESS = "BJJSessionMan_Delete_Success"
    CLEAR_LOCAL_START = "BJJSessionMan_ClearLocal_Start"
    CLEAR_LOCAL_SUCCESS = "BJJSessionMan_ClearLocal_Success"


_SEVERE_KINDS = {SessionManagerEventKind.LISTENER_FAIL, SessionManagerEventKind.SAVE_LOCAL_FAIL}


def error_parameters(error: BaseException) -> Dict[str, Any]:
    """Describe an exception for event parameters."""
    params: Dict[str, Any] = {
        "error_type": type(error).__name__,
        "error_description": str(error),
    }
    if isinstance(error, DomainError) and error.code:
        params["error_code"] = error.code
    return params


@dataclass(frozen=True)
class SessionManagerEvent:
    """A single SessionManager event with its payload."""
    kind: SessionManagerEventKind
    count: Optional[int] = None
    error: Optional[BaseException] = None
    session: Optional[BJJSession] = None

    @property
    def event_name(self) -> str:
        return self.kind.value

    @property
    def parameters(self) -> Optional[Dict[str, Any]]:
        if self.kind == SessionManagerEventKind.LISTENER_SUCCESS:
            return {"count": self.count}
        if self.error is not None:
            return error_parameters(self.error)
        if self.session is not None:
            return self.session.event_parameters
        return None

    @property
    def log_type(self) -> str:
        return LOG_TYPE_SEVERE if self.kind in _SEVERE_KINDS else LOG_TYPE_ANALYTIC

    # Constructors mirroring the manager's call sites

    @classmethod
    def listener_success(cls, count: int) -> "SessionManagerEvent":
        return cls(SessionManagerEventKind.LISTENER_SUCCESS, count=count)

    @classmethod
    def listener_fail(cls, error: BaseException) -> "SessionManagerEvent":
        return cls(SessionManagerEventKind.LISTENER_FAIL, error=error)

    @classmethod
    def save_local_fail(cls, error: BaseException) -> "SessionManagerEvent":
        return cls(SessionManagerEventKind.SAVE_LOCAL_FAIL, error=error)

    @classmethod
    def create_start(cls, session: BJJSession) -> "SessionManagerEvent":
        return cls(SessionManagerEventKind.CREATE_START, session=session)

    @classmethod
    def create_success(cls, session: BJJSession) -> "SessionManagerEvent":
        return cls(SessionManagerEventKind.CREATE_SUCCESS, session=session)
