"""Tests for the in-process remote session collection."""

import asyncio
from datetime import datetime, timedelta

import pytest

from fitfocus.domain.errors import RemoteServiceError, SessionNotFoundError
from fitfocus.domain.sessions.models import BJJSession, SessionType
from fitfocus.infrastructure.sessions.in_memory_remote import InMemoryRemoteSessionService


@pytest.fixture
def remote(session_a, session_b, session_c, base_date):
    other = BJJSession(session_id="Z", user_id="u2", date=base_date)
    return InMemoryRemoteSessionService([session_c, session_a, other, session_b])


class TestReads:
    @pytest.mark.asyncio
    async def test_get_session(self, remote, session_a):
        fetched = await remote.get_session("A")
        assert fetched.to_dict() == session_a.to_dict()

    @pytest.mark.asyncio
    async def test_get_missing_session_raises_not_found(self, remote):
        with pytest.raises(SessionNotFoundError) as exc_info:
            await remote.get_session("missing")
        assert exc_info.value.code == "SESSION_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_get_sessions_filters_by_user_and_orders_by_date_desc(self, remote):
        sessions = await remote.get_sessions("u1")
        assert [s.session_id for s in sessions] == ["A", "B", "C"]
        assert [s.session_id for s in await remote.get_sessions("u2")] == ["Z"]
        assert await remote.get_sessions("nobody") == []


class TestWrites:
    @pytest.mark.asyncio
    async def test_save_creates_document(self, remote, base_date):
        new = BJJSession(session_id="N", user_id="u1", date=base_date + timedelta(hours=1))
        await remote.save_session(new)
        assert remote.get_document("N")["user_id"] == "u1"
        assert [s.session_id for s in await remote.get_sessions("u1")][0] == "N"

    @pytest.mark.asyncio
    async def test_save_naive_date_sorts_with_stored_sessions(self, remote):
        await remote.save_session(BJJSession(session_id="N", user_id="u1", date=datetime(2025, 3, 11, 9, 0)))
        sessions = await remote.get_sessions("u1")
        assert [s.session_id for s in sessions] == ["N", "A", "B", "C"]
        assert remote.get_document("N")["date"] == "2025-03-11T09:00:00+00:00"

    @pytest.mark.asyncio
    async def test_save_merges_into_existing_document(self, remote, session_a):
        partial = BJJSession(session_id="A", user_id="u1", date=session_a.date, rating=1, created_at=None)
        await remote.save_session(partial)
        document = remote.get_document("A")
        assert document["rating"] == 1
        assert document["notes"] == "Guard retention rounds"
        assert document["created_at"] == session_a.created_at.isoformat()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method,value,field,stored",
        [
            ("update_session_duration", 1800.0, "duration", 1800.0),
            ("update_session_rating", 2, "rating", 2),
            ("update_session_notes", "Lots of scrambles", "notes", "Lots of scrambles"),
            ("update_session_type", SessionType.PRIVATE_LESSON, "session_type", "private_lesson"),
            ("update_session_techniques", ["Kimura", "Omoplata"], "techniques", ["Kimura", "Omoplata"]),
        ],
    )
    async def test_partial_updates_stamp_updated_at(self, remote, method, value, field, stored):
        assert remote.get_document("B")["updated_at"] is None
        await getattr(remote, method)("B", value)
        document = remote.get_document("B")
        assert document[field] == stored
        assert document["updated_at"] is not None

    @pytest.mark.asyncio
    async def test_update_missing_session_raises_not_found(self, remote):
        with pytest.raises(SessionNotFoundError):
            await remote.update_session_rating("missing", 3)

    @pytest.mark.asyncio
    async def test_delete_session(self, remote):
        await remote.delete_session("A")
        assert remote.get_document("A") is None
        with pytest.raises(SessionNotFoundError):
            await remote.get_session("A")

    @pytest.mark.asyncio
    async def test_delete_missing_session_is_noop(self, remote):
        await remote.delete_session("missing")
        assert len(await remote.get_sessions("u1")) == 3


class TestStream:
    @pytest.mark.asyncio
    async def test_first_emission_is_current_snapshot(self, remote):
        stream = remote.stream_sessions("u1")
        snapshot = await stream.__anext__()
        assert [s.session_id for s in snapshot] == ["A", "B", "C"]
        assert remote.active_stream_count == 1
        await stream.aclose()
        assert remote.active_stream_count == 0

    @pytest.mark.asyncio
    async def test_changes_emit_full_snapshots(self, remote):
        stream = remote.stream_sessions("u1")
        await stream.__anext__()

        await remote.delete_session("B")
        snapshot = await asyncio.wait_for(stream.__anext__(), timeout=1)
        assert [s.session_id for s in snapshot] == ["A", "C"]

        await remote.update_session_rating("C", 5)
        snapshot = await asyncio.wait_for(stream.__anext__(), timeout=1)
        assert [s.session_id for s in snapshot] == ["A", "C"]
        assert snapshot[1].rating == 5
        await stream.aclose()

    @pytest.mark.asyncio
    async def test_changes_for_other_users_are_not_emitted(self, remote):
        stream = remote.stream_sessions("u1")
        await stream.__anext__()
        await remote.update_session_rating("Z", 1)
        remote.finish_streams()
        with pytest.raises(StopAsyncIteration):
            await asyncio.wait_for(stream.__anext__(), timeout=1)

    @pytest.mark.asyncio
    async def test_fail_streams_raises_into_consumer(self, remote):
        stream = remote.stream_sessions("u1")
        await stream.__anext__()
        remote.fail_streams(RemoteServiceError("connection lost"))
        with pytest.raises(RemoteServiceError):
            await asyncio.wait_for(stream.__anext__(), timeout=1)
        assert remote.active_stream_count == 0
