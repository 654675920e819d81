from arcanaflow.models.card import Arcana, DrawnCard, Keywords, TarotCard
from arcanaflow.models.failure import (
    CatalogLoadError,
    DuplicateSelectionError,
    EmptySelectionError,
    FailureKind,
    InvalidCardIndexError,
    KnownError,
    MalformedMessageError,
    NoActiveQueryError,
    ProtocolError,
    ReadingCompleteError,
)
from arcanaflow.models.session import SessionPhase, SessionState

__all__ = [
    "Arcana",
    "CatalogLoadError",
    "DrawnCard",
    "DuplicateSelectionError",
    "EmptySelectionError",
    "FailureKind",
    "InvalidCardIndexError",
    "Keywords",
    "KnownError",
    "MalformedMessageError",
    "NoActiveQueryError",
    "ProtocolError",
    "ReadingCompleteError",
    "SessionPhase",
    "SessionState",
    "TarotCard",
]
