"""Domain models for training sessions."""

from .models import BJJSession, SessionType, mock_session, mock_sessions, validate_rating

__all__ = [
    "BJJSession",
    "SessionType",
    "mock_session",
    "mock_sessions",
    "validate_rating",
]
