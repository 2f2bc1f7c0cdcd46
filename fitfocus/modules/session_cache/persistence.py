"""Structured-store implementation of the local session cache.

``save_sessions`` diffs against the stored rows by ``session_id``: rows that
are no longer present are deleted, existing rows are updated in place and new
ones inserted. The stored set after a save is exactly the given list.
"""

import json
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import delete, desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from fitfocus.core.log_sanitizer import sanitize_for_logging
from fitfocus.domain.errors import SessionDecodeError, StorageUnavailableError, ValidationError
from fitfocus.domain.sessions.models import BJJSession, SessionType

from .models import SessionRecord

logger = logging.getLogger(__name__)


def _to_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _dump_list(values: Optional[List[str]]) -> Optional[str]:
    return json.dumps(list(values)) if values is not None else None


def _load_list(raw: Optional[str]) -> Optional[List[str]]:
    return json.loads(raw) if raw is not None else None


def _apply(record: SessionRecord, session: BJJSession) -> None:
    record.user_id = session.user_id
    record.date = _to_utc(session.date)
    record.duration = session.duration
    record.session_type = session.session_type.value if session.session_type else None
    record.techniques_json = _dump_list(session.techniques)
    record.notes = session.notes
    record.rating = session.rating
    record.partner_ids_json = _dump_list(session.partner_ids)
    record.created_at = _to_utc(session.created_at)
    record.updated_at = _to_utc(session.updated_at)


def _to_model(record: SessionRecord) -> BJJSession:
    try:
        return BJJSession(
            session_id=record.session_id,
            user_id=record.user_id,
            date=_to_utc(record.date),
            duration=record.duration,
            session_type=SessionType(record.session_type) if record.session_type else None,
            techniques=_load_list(record.techniques_json),
            notes=record.notes,
            rating=record.rating,
            partner_ids=_load_list(record.partner_ids_json),
            created_at=_to_utc(record.created_at),
            updated_at=_to_utc(record.updated_at),
        )
    except (ValueError, TypeError, ValidationError) as e:
        raise SessionDecodeError(f"Malformed cached session {record.session_id}: {e}") from e


class SqlSessionPersistence:
    """Local session cache backed by a SQLAlchemy table."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def _get_session(self) -> Session:
        return self._session_factory()

    def get_sessions(self) -> List[BJJSession]:
        """All cached sessions in the order they were saved. Empty on any read failure."""
        try:
            with self._get_session() as session:
                records = session.query(SessionRecord).order_by(SessionRecord.position).all()
                return [_to_model(r) for r in records]
        except (SQLAlchemyError, SessionDecodeError, ValueError) as e:
            logger.warning("Error loading sessions from session cache: %s", e)
            return []

    def get_sessions_for_user(self, user_id: str) -> List[BJJSession]:
        """Cached sessions for one user, most recent date first. Empty on any read failure."""
        try:
            with self._get_session() as session:
                records = (
                    session.query(SessionRecord)
                    .filter(SessionRecord.user_id == user_id)
                    .order_by(desc(SessionRecord.date))
                    .all()
                )
                return [_to_model(r) for r in records]
        except (SQLAlchemyError, SessionDecodeError, ValueError) as e:
            logger.warning(
                "Error loading sessions for user %s from session cache: %s",
                sanitize_for_logging(user_id), e,
            )
            return []

    def save_sessions(self, sessions: List[BJJSession]) -> None:
        try:
            with self._get_session() as session:
                existing = {r.session_id: r for r in session.query(SessionRecord).all()}
                new_ids = {s.session_id for s in sessions}

                stale_ids = set(existing) - new_ids
                if stale_ids:
                    session.execute(
                        delete(SessionRecord).where(SessionRecord.session_id.in_(sorted(stale_ids)))
                    )

                for position, model in enumerate(sessions):
                    record = existing.get(model.session_id)
                    if record is None:
                        record = SessionRecord(session_id=model.session_id)
                        session.add(record)
                        existing[model.session_id] = record
                    _apply(record, model)
                    record.position = position

                session.commit()
        except SQLAlchemyError as e:
            raise StorageUnavailableError(f"Could not write session cache: {e}") from e
        logger.debug("Saved %d sessions to session cache", len(sessions))

    def clear_sessions(self) -> None:
        try:
            with self._get_session() as session:
                session.execute(delete(SessionRecord))
                session.commit()
        except SQLAlchemyError as e:
            raise StorageUnavailableError(f"Could not clear session cache: {e}") from e

    def clear_sessions_for_user(self, user_id: str) -> None:
        try:
            with self._get_session() as session:
                session.execute(delete(SessionRecord).where(SessionRecord.user_id == user_id))
                session.commit()
        except SQLAlchemyError as e:
            raise StorageUnavailableError(f"Could not clear session cache: {e}") from e
