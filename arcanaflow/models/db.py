"""
SQLAlchemy ORM models for persistent storage.

Readings are recorded after an interpretation has been delivered. Chat
turns are follow-up messages attached to a reading.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class SessionDB(Base):
    """
    A reading session.

    Created on first use by a recorded reading; the id is the protocol
    session id.
    """

    __tablename__ = "sessions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_metadata: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )

    readings: Mapped[list["ReadingDB"]] = relationship(
        back_populates="session", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<SessionDB(id={self.id})>"


class ReadingDB(Base):
    """
    A delivered reading: the query, the drawn cards and the narration.
    """

    __tablename__ = "readings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("sessions.id", ondelete="CASCADE"), index=True
    )
    user_query: Mapped[str] = mapped_column(Text)

    # Serialized DrawnCards, in draw order
    drawn_cards: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    ai_interpretation: Mapped[str] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )

    session: Mapped["SessionDB"] = relationship(back_populates="readings")
    messages: Mapped[list["MessageDB"]] = relationship(
        back_populates="reading",
        cascade="all, delete-orphan",
        order_by="MessageDB.id",
    )

    def __repr__(self) -> str:
        return f"<ReadingDB(id={self.id}, session_id={self.session_id})>"


class MessageDB(Base):
    """A chat turn attached to a reading."""

    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    reading_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("readings.id", ondelete="CASCADE"), index=True
    )
    role: Mapped[str] = mapped_column(String(16))
    content: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )

    reading: Mapped["ReadingDB"] = relationship(back_populates="messages")

    def __repr__(self) -> str:
        return f"<MessageDB(reading_id={self.reading_id}, role={self.role})>"
