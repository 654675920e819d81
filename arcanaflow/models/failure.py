"""
Failure classification for the reading protocol.

Three classes of failure exist:

- Protocol validation failures (ProtocolError and subclasses). Reported to
  the client as an error message; the connection stays open.
- Collaborator failures (interpretation, persistence). Absorbed at the
  collaborator boundary and never raised into the protocol.
- Transport failures. End the session that owns the connection.

CatalogLoadError is raised only at startup, when the card catalog cannot be
loaded.
"""

from enum import Enum


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    MISSING_REQUIRED = "missing_required"
    MALFORMED_MESSAGE = "malformed_message"
    DUPLICATE_SELECTION = "duplicate_selection"

    # Protocol ordering
    INVALID_PHASE = "invalid_phase"

    # Service failures
    EXTERNAL_API_ERROR = "external_api_error"

    # Startup failures
    CATALOG_INVALID = "catalog_invalid"


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        super().__init__(message)


class CatalogLoadError(KnownError):
    """The card catalog source is missing, malformed or inconsistent."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(kind=FailureKind.CATALOG_INVALID, message=message, detail=detail)


# =============================================================================
# PROTOCOL VALIDATION ERRORS
# =============================================================================


class ProtocolError(KnownError):
    """
    A client message was rejected.

    The message text is sent back to the client verbatim, so it must not
    contain internal details.
    """


class MalformedMessageError(ProtocolError):
    """An inbound frame could not be decoded into a known message."""

    def __init__(self, detail: str | None = None):
        super().__init__(
            kind=FailureKind.MALFORMED_MESSAGE,
            message="Malformed message",
            detail=detail,
        )


class NoActiveQueryError(ProtocolError):
    """A message that needs a query arrived before start_session."""

    def __init__(self) -> None:
        super().__init__(
            kind=FailureKind.MISSING_REQUIRED,
            message="No session started - please start a session first",
        )


class ReadingCompleteError(ProtocolError):
    """The reading for the current query was already delivered."""

    def __init__(self) -> None:
        super().__init__(
            kind=FailureKind.INVALID_PHASE,
            message="Reading already delivered - start a new session to ask again",
        )


class InvalidCardIndexError(ProtocolError):
    """A selected index is outside the catalog."""

    def __init__(self, card_index: int, catalog_size: int):
        self.card_index = card_index
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message=f"Invalid card index: {card_index}",
            detail=f"valid range is 0..{catalog_size - 1}",
        )


class DuplicateSelectionError(ProtocolError):
    """A selected index was already chosen in this session."""

    def __init__(self, card_index: int):
        self.card_index = card_index
        super().__init__(
            kind=FailureKind.DUPLICATE_SELECTION,
            message="Card already selected",
            detail=f"index {card_index}",
        )


class EmptySelectionError(ProtocolError):
    """Interpretation was requested with no cards selected."""

    def __init__(self) -> None:
        super().__init__(
            kind=FailureKind.MISSING_REQUIRED,
            message="No cards selected",
        )
