"""
Reading lookup and chat turn endpoints.
"""

from datetime import datetime
from typing import Annotated, Any, Literal

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from arcanaflow.db.database import get_session
from arcanaflow.db.operations import get_reading, save_message

router = APIRouter(prefix="/readings", tags=["readings"])

ChatRole = Literal["user", "assistant"]


class MessageResponse(BaseModel):
    """A stored chat turn."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    reading_id: int
    role: str
    content: str
    created_at: datetime


class ReadingResponse(BaseModel):
    """A stored reading with its chat turns."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    session_id: str
    user_query: str
    drawn_cards: list[dict[str, Any]] = Field(default_factory=list)
    ai_interpretation: str
    created_at: datetime
    messages: list[MessageResponse] = Field(default_factory=list)


class MessageCreateRequest(BaseModel):
    """Request model for adding a chat turn to a reading."""

    role: ChatRole = Field(..., description="Who wrote the turn")
    content: str = Field(..., min_length=1)


def _reading_not_found(reading_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Reading {reading_id} not found",
    )


@router.get("/{reading_id}", response_model=ReadingResponse)
async def get_reading_detail(
    reading_id: int,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ReadingResponse:
    """Get a stored reading and its chat turns."""
    reading = await get_reading(session, reading_id)
    if reading is None:
        raise _reading_not_found(reading_id)

    return ReadingResponse.model_validate(reading)


@router.post(
    "/{reading_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_message(
    reading_id: int,
    request: MessageCreateRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> MessageResponse:
    """Append a chat turn to a stored reading."""
    reading = await get_reading(session, reading_id)
    if reading is None:
        raise _reading_not_found(reading_id)

    message = await save_message(session, reading_id, request.role, request.content)
    return MessageResponse.model_validate(message)
