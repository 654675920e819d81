"""
Reading persistence for the WebSocket protocol.

Runs outside any HTTP request, so it opens its own database session per
reading. Failures are logged and swallowed: losing a record must never
interrupt a reading that was already delivered.
"""

import logging
from collections.abc import Sequence

from arcanaflow.db.database import SessionFactory, async_session_factory
from arcanaflow.db.operations import save_reading
from arcanaflow.models.card import DrawnCard

logger = logging.getLogger(__name__)


class ReadingStore:
    """Records delivered readings through a session factory."""

    def __init__(self, session_factory: SessionFactory | None = None):
        self._session_factory = session_factory or async_session_factory

    async def save_reading(
        self,
        session_id: str,
        query: str,
        cards: Sequence[DrawnCard],
        narration: str,
    ) -> int | None:
        """
        Store one reading.

        Returns:
            The new reading id, or None if it could not be stored
        """
        try:
            async with self._session_factory() as session:
                reading = await save_reading(session, session_id, query, cards, narration)
                await session.commit()
                reading_id = reading.id
        except Exception:
            logger.exception("Failed to save reading for session %s", session_id)
            return None

        logger.info(
            "reading_saved",
            extra={"session_id": session_id, "reading_id": reading_id, "card_count": len(cards)},
        )
        return reading_id
