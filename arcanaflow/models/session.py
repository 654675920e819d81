"""
Per-connection session state.

A SessionState has exactly one owner: the dispatcher serving its
connection. It is never shared, so it carries no locking.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum

from arcanaflow.models.failure import (
    DuplicateSelectionError,
    InvalidCardIndexError,
    NoActiveQueryError,
    ReadingCompleteError,
)


class SessionPhase(str, Enum):
    """Position in the reading protocol."""

    IDLE = "idle"
    QUERY_ACTIVE = "query_active"
    SELECTING = "selecting"
    INTERPRETATION_DELIVERED = "interpretation_delivered"
    CLOSED = "closed"


# Phases in which the current query still accepts selections and
# interpretation requests.
QUERY_PHASES = frozenset({SessionPhase.QUERY_ACTIVE, SessionPhase.SELECTING})


def new_session_id() -> str:
    return str(uuid.uuid4())


@dataclass
class SessionState:
    """
    Mutable record for one connection.

    Attributes:
        session_id: Opaque identifier, regenerated on every start
        query: The seeker's active query, None until start_session
        selected_indices: Selected catalog positions in insertion order
        phase: Current protocol phase
    """

    session_id: str = field(default_factory=new_session_id)
    query: str | None = None
    selected_indices: list[int] = field(default_factory=list)
    phase: SessionPhase = SessionPhase.IDLE

    @property
    def is_closed(self) -> bool:
        return self.phase is SessionPhase.CLOSED

    @property
    def has_active_query(self) -> bool:
        return self.query is not None and self.phase in QUERY_PHASES

    def start(self, query: str) -> str:
        """Register a new query and return the fresh session id."""
        self.session_id = new_session_id()
        self.query = query
        self.selected_indices.clear()
        self.phase = SessionPhase.QUERY_ACTIVE
        return self.session_id

    def require_active_query(self) -> str:
        """
        Return the active query.

        Raises:
            ReadingCompleteError: If the reading for this query was delivered
            NoActiveQueryError: If no query has been registered
        """
        if self.phase is SessionPhase.INTERPRETATION_DELIVERED:
            raise ReadingCompleteError()
        if not self.has_active_query or self.query is None:
            raise NoActiveQueryError()
        return self.query

    def select(self, card_index: int, catalog_size: int) -> None:
        """
        Record a selected catalog position.

        The selection is left untouched when validation fails.

        Raises:
            InvalidCardIndexError: If the index is outside the catalog
            DuplicateSelectionError: If the index was already selected
        """
        self.require_active_query()
        if not 0 <= card_index < catalog_size:
            raise InvalidCardIndexError(card_index, catalog_size)
        if card_index in self.selected_indices:
            raise DuplicateSelectionError(card_index)

        self.selected_indices.append(card_index)
        self.phase = SessionPhase.SELECTING

    def clear_selection(self) -> None:
        """Forget selected positions; the query and phase are kept."""
        self.selected_indices.clear()

    def mark_delivered(self) -> None:
        self.phase = SessionPhase.INTERPRETATION_DELIVERED

    def close(self) -> None:
        self.phase = SessionPhase.CLOSED
        self.query = None
        self.selected_indices.clear()
