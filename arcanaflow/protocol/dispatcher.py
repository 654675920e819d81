"""
Session protocol dispatcher.

Turns one inbound message into zero or more outbound messages, validating
it against the connection's SessionState. The dispatcher is the only code
that mutates a SessionState, and it handles one message at a time, so a
session never sees interleaved handlers.
"""

import asyncio
import logging
import random
from typing import assert_never

from arcanaflow.models.failure import EmptySelectionError, ProtocolError
from arcanaflow.models.messages import (
    CardSelected,
    ClientMessage,
    DeckState,
    Error,
    InterpretationChunk,
    InterpretationComplete,
    Ping,
    Pong,
    RequestInterpretation,
    SelectCard,
    SessionStarted,
    Shuffle,
    ShuffleAnimation,
    StartSession,
    parse_client_message,
)
from arcanaflow.models.session import SessionState
from arcanaflow.protocol.channel import OutboundChannel
from arcanaflow.services.card_catalog import CardCatalog
from arcanaflow.services.interpretation import Interpreter
from arcanaflow.services.reading_store import ReadingStore
from arcanaflow.services.table_layout import deck_positions, shuffle_sequence
from arcanaflow.services.weighted_drawer import draw_cards

logger = logging.getLogger(__name__)

CHUNK_SEPARATOR = ". "
DEFAULT_CHUNK_DELAY = 0.1  # seconds


def split_into_chunks(text: str) -> list[str]:
    """
    Split narration into sentence chunks for streaming.

    Every chunk except the last keeps its ". " terminator, so joining the
    chunks reproduces the text minus any empty sentences.
    """
    pieces = [piece for piece in text.split(CHUNK_SEPARATOR) if piece]
    return [
        piece + CHUNK_SEPARATOR if i < len(pieces) - 1 else piece
        for i, piece in enumerate(pieces)
    ]


class ProtocolDispatcher:
    """
    Handles the messages of one connection.

    Args:
        catalog: Shared read-only card catalog
        interpreter: Narration collaborator; must not raise
        reading_store: Persistence collaborator; must not raise
        channel: Outbound channel of this connection
        rng: Random source for draws and shuffle animation
        chunk_delay: Pause in seconds after each interpretation chunk
    """

    def __init__(
        self,
        catalog: CardCatalog,
        interpreter: Interpreter,
        reading_store: ReadingStore,
        channel: OutboundChannel,
        rng: random.Random | None = None,
        chunk_delay: float = DEFAULT_CHUNK_DELAY,
    ):
        self.catalog = catalog
        self.interpreter = interpreter
        self.reading_store = reading_store
        self.channel = channel
        self.rng = rng or random.Random()
        self.chunk_delay = chunk_delay

    async def handle_frame(self, frame: str | bytes, state: SessionState) -> None:
        """
        Decode and dispatch one raw frame.

        Protocol errors, including undecodable frames, are reported to the
        client as an error message and leave the session usable.
        """
        try:
            message = parse_client_message(frame)
            await self.dispatch(message, state)
        except ProtocolError as e:
            logger.warning(
                "Rejected message for session %s: %s",
                state.session_id,
                e.message,
                extra={"failure_kind": e.kind.value, "detail": e.detail},
            )
            await self.channel.send(Error(message=e.message))

    async def dispatch(self, message: ClientMessage, state: SessionState) -> None:
        """
        Handle one decoded message.

        Raises:
            ProtocolError: If the message is not valid in the current state
        """
        logger.debug("Handling %s for session %s", message.type, state.session_id)

        match message:
            case StartSession(query=query):
                await self._start_session(query, state)
            case SelectCard(card_index=card_index):
                await self._select_card(card_index, state)
            case RequestInterpretation():
                await self._request_interpretation(state)
            case Shuffle():
                await self._shuffle(state)
            case Ping():
                await self.channel.send(Pong())
            case _:
                assert_never(message)

    async def _start_session(self, query: str, state: SessionState) -> None:
        session_id = state.start(query)
        logger.info("Session started", extra={"session_id": session_id, "query": query})

        await self.channel.send(SessionStarted(session_id=session_id))
        await self.channel.send(DeckState(card_positions=deck_positions(len(self.catalog))))

    async def _select_card(self, card_index: int, state: SessionState) -> None:
        state.select(card_index, len(self.catalog))
        query = state.require_active_query()

        drawn = draw_cards(self.catalog, query, 1, self.rng)[0]
        logger.info(
            "Card selected",
            extra={
                "session_id": state.session_id,
                "card_index": card_index,
                "card_id": drawn.card.id,
                "is_reversed": drawn.is_reversed,
            },
        )
        await self.channel.send(CardSelected(card_id=drawn.card.id, is_reversed=drawn.is_reversed))

    async def _request_interpretation(self, state: SessionState) -> None:
        query = state.require_active_query()
        if not state.selected_indices:
            raise EmptySelectionError()

        session_id = state.session_id
        cards = draw_cards(self.catalog, query, len(state.selected_indices), self.rng)
        logger.info(
            "Interpretation requested",
            extra={"session_id": session_id, "card_count": len(cards)},
        )

        narration = await self.interpreter.interpret(query, cards)

        for chunk in split_into_chunks(narration):
            await self.channel.send(InterpretationChunk(text=chunk))
            await asyncio.sleep(self.chunk_delay)
        await self.channel.send(InterpretationComplete())

        state.mark_delivered()
        await self.reading_store.save_reading(session_id, query, cards, narration)

    async def _shuffle(self, state: SessionState) -> None:
        if state.is_closed:
            return
        state.clear_selection()
        logger.info("Shuffle requested", extra={"session_id": state.session_id})

        await self.channel.send(
            ShuffleAnimation(sequence=shuffle_sequence(len(self.catalog), self.rng))
        )
