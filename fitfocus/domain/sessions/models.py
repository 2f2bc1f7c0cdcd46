"""Domain models for BJJ training sessions."""

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..errors import SessionDecodeError, ValidationError


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SessionType(str, Enum):
    """Kind of training session. Values are the stored wire values."""
    NO_GI = "no_gi"
    GI = "with_gi"
    OPEN_MAT = "open_mat"
    DRILLING = "drilling"
    COMPETITION = "competition"
    PRIVATE_LESSON = "private_lesson"


def validate_rating(rating: Optional[int]) -> Optional[int]:
    """Check a rating is in the 1-5 range expected by the app.

    The session model accepts any integer; callers creating sessions from
    user input run this first.
    """
    if rating is None:
        return None
    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        raise ValidationError(f"Rating must be an integer between 1 and 5, got {rating!r}")
    return rating


@dataclass(frozen=True, eq=False)
class BJJSession:
    """Domain model for one logged training session.

    Identity is the ``session_id``: two records with the same id compare equal
    even when other fields differ.
    """
    user_id: str
    session_id: str = field(default_factory=lambda: str(uuid4()))
    date: datetime = field(default_factory=_now_utc)
    duration: Optional[float] = None
    session_type: Optional[SessionType] = None
    techniques: Optional[List[str]] = None
    notes: Optional[str] = None
    rating: Optional[int] = None
    partner_ids: Optional[List[str]] = None
    created_at: Optional[datetime] = field(default_factory=_now_utc)
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValidationError("Session user_id must not be empty")
        if not self.session_id:
            raise ValidationError("Session session_id must not be empty")
        if self.duration is not None and self.duration < 0:
            raise ValidationError(f"Session duration must be non-negative, got {self.duration}")
        if not isinstance(self.date, datetime):
            raise ValidationError(f"Session date must be a datetime, got {self.date!r}")
        # Naive values are taken as UTC
        for name in ("date", "created_at", "updated_at"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, datetime):
                raise ValidationError(f"Session {name} must be a datetime, got {value!r}")
            object.__setattr__(self, name, _as_utc(value))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BJJSession):
            return NotImplemented
        return self.session_id == other.session_id

    def __hash__(self) -> int:
        return hash(self.session_id)

    @property
    def duration_in_minutes(self) -> Optional[int]:
        if self.duration is None:
            return None
        return math.floor(self.duration / 60)

    @property
    def is_rated(self) -> bool:
        return self.rating is not None

    @property
    def has_notes(self) -> bool:
        return bool(self.notes and self.notes.strip())

    @property
    def event_parameters(self) -> Dict[str, Any]:
        """Analytics-safe summary; notes text and partner ids are never included."""
        params: Dict[str, Any] = {
            "session_session_id": self.session_id,
            "session_user_id": self.user_id,
            "session_date": self.date.isoformat(),
            "session_duration": self.duration,
            "session_session_type": self.session_type.value if self.session_type else None,
            "session_techniques_count": len(self.techniques) if self.techniques is not None else None,
            "session_has_notes": bool(self.notes),
            "session_rating": self.rating,
            "session_partner_ids_count": len(self.partner_ids) if self.partner_ids is not None else None,
            "session_created_at": self.created_at.isoformat() if self.created_at else None,
            "session_updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        return {k: v for k, v in params.items() if v is not None}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a snake_case document dictionary."""
        return {
            "session_id": self.session_id,
            "user_id": self.user_id,
            "date": self.date.isoformat(),
            "duration": self.duration,
            "session_type": self.session_type.value if self.session_type else None,
            "techniques": list(self.techniques) if self.techniques is not None else None,
            "notes": self.notes,
            "rating": self.rating,
            "partner_ids": list(self.partner_ids) if self.partner_ids is not None else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BJJSession":
        """Build a session from a document dictionary.

        Raises:
            SessionDecodeError: If required keys are missing or a value is malformed
        """
        if not isinstance(data, dict):
            raise SessionDecodeError(f"Expected a session object, got {type(data).__name__}")
        try:
            session_type = data.get("session_type")
            return cls(
                session_id=data["session_id"],
                user_id=data["user_id"],
                date=_parse_datetime(data["date"]),
                duration=float(data["duration"]) if data.get("duration") is not None else None,
                session_type=SessionType(session_type) if session_type is not None else None,
                techniques=_parse_string_list(data.get("techniques")),
                notes=data.get("notes"),
                rating=int(data["rating"]) if data.get("rating") is not None else None,
                partner_ids=_parse_string_list(data.get("partner_ids")),
                created_at=_parse_datetime(data.get("created_at")),
                updated_at=_parse_datetime(data.get("updated_at")),
            )
        except KeyError as e:
            raise SessionDecodeError(f"Session document is missing required key {e}") from e
        except (TypeError, ValueError, ValidationError) as e:
            raise SessionDecodeError(f"Malformed session document: {e}") from e


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _parse_string_list(value: Any) -> Optional[List[str]]:
    if value is None:
        return None
    if not isinstance(value, list):
        raise TypeError(f"expected a list, got {type(value).__name__}")
    return [str(item) for item in value]


def mock_sessions() -> List[BJJSession]:
    """Sample sessions for previews, mock services and tests."""
    now = _now_utc()
    day = timedelta(days=1)
    return [
        BJJSession(
            session_id="session1",
            user_id="user1",
            date=now,
            duration=3600,
            session_type=SessionType.GI,
            techniques=["Armbar", "Triangle Choke"],
            notes="Great session, worked on guard passing",
            rating=5,
            partner_ids=["partner1", "partner2"],
            created_at=now,
        ),
        BJJSession(
            session_id="session2",
            user_id="user1",
            date=now - day,
            duration=5400,
            session_type=SessionType.NO_GI,
            techniques=["Leg locks", "Back takes"],
            rating=4,
            created_at=now - day,
        ),
        BJJSession(
            session_id="session3",
            user_id="user1",
            date=now - 2 * day,
            duration=7200,
            session_type=SessionType.OPEN_MAT,
            notes="Focused on drilling submissions",
            created_at=now - 2 * day,
        ),
        BJJSession(
            session_id="session4",
            user_id="user2",
            date=now - 3 * day,
            duration=3600,
            session_type=SessionType.COMPETITION,
            techniques=["Takedowns", "Guard retention"],
            rating=5,
            created_at=now - 3 * day,
        ),
    ]


def mock_session() -> BJJSession:
    return mock_sessions()[0]
