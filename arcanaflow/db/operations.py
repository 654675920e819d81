"""
Database CRUD operations.

Async functions for sessions, readings and chat turns. None of them
commit; the caller owns the transaction.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from arcanaflow.models.card import DrawnCard
from arcanaflow.models.db import MessageDB, ReadingDB, SessionDB

# --- Session Operations ---


async def get_or_create_session(
    session: AsyncSession,
    session_id: str,
    user_metadata: dict[str, Any] | None = None,
) -> tuple[SessionDB, bool]:
    """
    Get a session row by id, creating it if missing.

    Returns:
        Tuple of (session row, created) where created is True if new.
    """
    existing = await session.get(SessionDB, session_id)
    if existing is not None:
        return existing, False

    row = SessionDB(id=session_id, user_metadata=user_metadata or {})
    session.add(row)
    await session.flush()
    return row, True


# --- Reading Operations ---


def serialize_cards(cards: Sequence[DrawnCard]) -> list[dict[str, Any]]:
    """Drawn cards as JSON-ready dicts, in draw order."""
    return [drawn.to_dict() for drawn in cards]


async def save_reading(
    session: AsyncSession,
    session_id: str,
    query: str,
    cards: Sequence[DrawnCard],
    interpretation: str,
) -> ReadingDB:
    """
    Record a delivered reading.

    Creates the owning session row on first use.
    """
    await get_or_create_session(session, session_id)

    reading = ReadingDB(
        session_id=session_id,
        user_query=query,
        drawn_cards=serialize_cards(cards),
        ai_interpretation=interpretation,
    )
    session.add(reading)
    await session.flush()
    return reading


async def get_reading(session: AsyncSession, reading_id: int) -> ReadingDB | None:
    """
    Get a reading with its chat turns.

    Returns None if no reading has this id.
    """
    result = await session.execute(
        select(ReadingDB)
        .where(ReadingDB.id == reading_id)
        .options(selectinload(ReadingDB.messages))
    )
    return result.scalar_one_or_none()


async def get_readings_for_session(session: AsyncSession, session_id: str) -> list[ReadingDB]:
    """All readings recorded under a session, oldest first."""
    result = await session.execute(
        select(ReadingDB).where(ReadingDB.session_id == session_id).order_by(ReadingDB.id)
    )
    return list(result.scalars().all())


# --- Chat Turn Operations ---


async def save_message(
    session: AsyncSession,
    reading_id: int,
    role: str,
    content: str,
) -> MessageDB:
    """Append a chat turn to a reading."""
    message = MessageDB(reading_id=reading_id, role=role, content=content)
    session.add(message)
    await session.flush()
    return message


async def get_messages_for_reading(session: AsyncSession, reading_id: int) -> list[MessageDB]:
    """Chat turns for a reading in the order they were stored."""
    result = await session.execute(
        select(MessageDB).where(MessageDB.reading_id == reading_id).order_by(MessageDB.id)
    )
    return list(result.scalars().all())
