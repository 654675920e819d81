"""
WebSocket message schema.

Inbound and outbound messages are closed sets of variants tagged by a
snake_case ``type`` field. Adding a variant means adding a model here, adding
it to the union, and handling it in the dispatcher's ``match``.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from arcanaflow.models.failure import MalformedMessageError

# =============================================================================
# INBOUND (client -> server)
# =============================================================================


class _ClientMessageBase(BaseModel):
    # No lax coercion: true, "2" and 3.0 are not card indices
    model_config = ConfigDict(strict=True)


class StartSession(_ClientMessageBase):
    type: Literal["start_session"] = "start_session"
    query: str


class SelectCard(_ClientMessageBase):
    type: Literal["select_card"] = "select_card"
    card_index: int = Field(..., ge=0)


class RequestInterpretation(_ClientMessageBase):
    type: Literal["request_interpretation"] = "request_interpretation"


class Shuffle(_ClientMessageBase):
    type: Literal["shuffle"] = "shuffle"


class Ping(_ClientMessageBase):
    type: Literal["ping"] = "ping"


ClientMessage = Annotated[
    StartSession | SelectCard | RequestInterpretation | Shuffle | Ping,
    Field(discriminator="type"),
]

_client_message_adapter: TypeAdapter[ClientMessage] = TypeAdapter(ClientMessage)


def parse_client_message(frame: str | bytes) -> ClientMessage:
    """
    Decode one inbound frame.

    Raises:
        MalformedMessageError: If the frame is not JSON, has an unknown
            ``type``, or fails field validation
    """
    try:
        return _client_message_adapter.validate_json(frame)
    except ValidationError as e:
        raise MalformedMessageError(detail=str(e)) from e


# =============================================================================
# OUTBOUND (server -> client)
# =============================================================================


class CardPosition(BaseModel):
    """Resting position of one card on the table."""

    card_id: str
    x: float
    y: float
    rotation: float
    is_face_up: bool
    z_index: int


class Position(BaseModel):
    x: float
    y: float
    rotation: float


class ShuffleStep(BaseModel):
    """One card's movement during the shuffle animation."""

    model_config = ConfigDict(populate_by_name=True)

    card_id: str
    from_: Position = Field(..., alias="from")
    to: Position
    duration_ms: int


class SessionStarted(BaseModel):
    type: Literal["session_started"] = "session_started"
    session_id: str


class DeckState(BaseModel):
    type: Literal["deck_state"] = "deck_state"
    card_positions: list[CardPosition]


class CardSelected(BaseModel):
    type: Literal["card_selected"] = "card_selected"
    card_id: str
    is_reversed: bool


class InterpretationChunk(BaseModel):
    type: Literal["interpretation_chunk"] = "interpretation_chunk"
    text: str


class InterpretationComplete(BaseModel):
    type: Literal["interpretation_complete"] = "interpretation_complete"


class ShuffleAnimation(BaseModel):
    type: Literal["shuffle_animation"] = "shuffle_animation"
    sequence: list[ShuffleStep]


class Error(BaseModel):
    type: Literal["error"] = "error"
    message: str


class Pong(BaseModel):
    type: Literal["pong"] = "pong"


ServerMessage = Annotated[
    SessionStarted
    | DeckState
    | CardSelected
    | InterpretationChunk
    | InterpretationComplete
    | ShuffleAnimation
    | Error
    | Pong,
    Field(discriminator="type"),
]


SERVER_MESSAGE_TYPES: tuple[type[BaseModel], ...] = (
    SessionStarted,
    DeckState,
    CardSelected,
    InterpretationChunk,
    InterpretationComplete,
    ShuffleAnimation,
    Error,
    Pong,
)


def encode_server_message(message: ServerMessage) -> str:
    """Serialize an outbound message to its JSON wire form."""
    return message.model_dump_json(by_alias=True)
