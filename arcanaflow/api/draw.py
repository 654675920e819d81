"""
One-shot draw endpoint.

Draws, narrates and records a reading in a single request, for clients
that do not hold a WebSocket session.
"""

import logging
import random
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from arcanaflow.api.dependencies import get_catalog, get_interpreter
from arcanaflow.db.database import get_session
from arcanaflow.db.operations import save_reading, serialize_cards
from arcanaflow.models.session import new_session_id
from arcanaflow.services.card_catalog import STANDARD_DECK_SIZE, CardCatalog
from arcanaflow.services.interpretation import Interpreter
from arcanaflow.services.weighted_drawer import draw_cards

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["draw"])


class DrawRequest(BaseModel):
    """Request model for a one-shot reading."""

    user_query: str = Field(
        ...,
        min_length=1,
        description="The seeker's question",
        examples=["Will I find a new job?"],
    )
    count: int = Field(
        default=3,
        ge=1,
        le=STANDARD_DECK_SIZE,
        description="Number of cards to draw",
    )


class DrawResponse(BaseModel):
    """Response model for a one-shot reading."""

    session_id: str
    reading_id: int
    cards: list[dict[str, Any]] = Field(default_factory=list)
    interpretation: str


@router.post("/draw", response_model=DrawResponse)
async def draw(
    request: DrawRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
    catalog: Annotated[CardCatalog, Depends(get_catalog)],
    interpreter: Annotated[Interpreter, Depends(get_interpreter)],
) -> DrawResponse:
    """
    Draw cards for a query and narrate them.

    The reading is stored under a fresh session id.
    """
    cards = draw_cards(catalog, request.user_query, request.count, random.Random())
    interpretation = await interpreter.interpret(request.user_query, cards)

    session_id = new_session_id()
    reading = await save_reading(session, session_id, request.user_query, cards, interpretation)

    logger.info(
        "One-shot reading drawn",
        extra={"session_id": session_id, "reading_id": reading.id, "card_count": len(cards)},
    )
    return DrawResponse(
        session_id=session_id,
        reading_id=reading.id,
        cards=serialize_cards(cards),
        interpretation=interpretation,
    )
