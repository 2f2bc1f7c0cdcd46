from datetime import datetime, timedelta, timezone
from typing import List

import pytest

from fitfocus.domain.sessions.models import BJJSession, SessionType


class RecordingEventLogger:
    """EventLogger that keeps every tracked event."""

    def __init__(self):
        self.events = []

    def track_event(self, event) -> None:
        self.events.append(event)

    @property
    def names(self) -> List[str]:
        return [e.event_name for e in self.events]


@pytest.fixture
def event_logger():
    return RecordingEventLogger()


@pytest.fixture
def base_date():
    return datetime(2025, 3, 10, 18, 30, tzinfo=timezone.utc)


@pytest.fixture
def session_a(base_date):
    return BJJSession(
        session_id="A",
        user_id="u1",
        date=base_date,
        duration=3600,
        session_type=SessionType.GI,
        techniques=["Armbar"],
        notes="Guard retention rounds",
        rating=4,
        partner_ids=["p1"],
        created_at=base_date,
    )


@pytest.fixture
def session_b(base_date):
    return BJJSession(
        session_id="B",
        user_id="u1",
        date=base_date - timedelta(days=1),
        duration=5400,
        session_type=SessionType.NO_GI,
        created_at=base_date - timedelta(days=1),
    )


@pytest.fixture
def session_c(base_date):
    return BJJSession(
        session_id="C",
        user_id="u1",
        date=base_date - timedelta(days=2),
        session_type=SessionType.OPEN_MAT,
        created_at=base_date - timedelta(days=2),
    )
