"""SQLAlchemy models for the structured session cache.

List fields are stored as JSON text. Datetimes are stored in UTC; SQLite
returns them naive, so readers re-attach UTC.
"""

from sqlalchemy import Column, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class SessionRecord(Base):
    """A cached BJJ session row."""

    __tablename__ = "bjj_sessions"

    session_id = Column(String(64), primary_key=True)
    user_id = Column(String(255), nullable=False, index=True)
    date = Column(DateTime(timezone=True), nullable=False)
    duration = Column(Float, nullable=True)
    session_type = Column(String(32), nullable=True)
    techniques_json = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)
    partner_ids_json = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    # Index in the most recently saved list; preserves save order on read
    position = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("ix_bjj_sessions_user_date", "user_id", "date"),
    )
