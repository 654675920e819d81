"""
Interpretation generator.

Narrates a reading with Claude. Never raises: when the API key is missing,
the request fails, or the response carries no text, a deterministic
narration is built locally from the card names and keywords.
"""

import logging
from collections.abc import Sequence

import anthropic
from anthropic.types import MessageParam, TextBlock

from arcanaflow.config import settings
from arcanaflow.models.card import DrawnCard
from arcanaflow.models.failure import FailureKind, KnownError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a mystical tarot master: an empathetic guide who reads the cards \
with psychological insight (Jungian archetypes) and spiritual wisdom.

## Tone
- Enigmatic but warm, authoritative yet gentle.
- Poetic phrasing that stays easy to follow.

## Philosophy
The cards show possibilities and energies, not fixed fate. Empower the seeker.

## For each card
1. Acknowledge the card's energy.
2. Describe one visual element that relates to the seeker's question.
3. Connect the card's archetype to the seeker's situation.
4. Offer actionable guidance.
5. Describe the outcome if the guidance is followed.

Then synthesize the cards into one reading. Frame difficult cards
(The Tower, Death) as necessary transformations, never as doom.

## Input
The seeker's question, followed by the drawn cards with orientation and keywords."""

FALLBACK_INTRO = "The cards have spoken, seeker."
FALLBACK_ADVICE = "Focus on your inner truth."


class InterpretationError(KnownError):
    """The remote narration could not be produced."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(kind=FailureKind.EXTERNAL_API_ERROR, message=message, detail=detail)


def format_cards_for_prompt(cards: Sequence[DrawnCard]) -> str:
    """One line per card with its drawn orientation and keywords."""
    lines = []
    for i, drawn in enumerate(cards, start=1):
        orientation = "Reversed" if drawn.is_reversed else "Upright"
        lines.append(
            f"Card {i}: {drawn.card.name} ({orientation}) - Keywords: {', '.join(drawn.keywords)}"
        )
    return "\n".join(lines)


def build_user_message(query: str, cards: Sequence[DrawnCard]) -> str:
    return (
        f'The seeker asks: "{query}"\n\n'
        f"The following cards have been drawn:\n{format_cards_for_prompt(cards)}\n\n"
        "Please provide a mystical interpretation of this reading."
    )


def fallback_interpretation(query: str, cards: Sequence[DrawnCard]) -> str:
    """
    Narration built locally from card names and keywords.

    Deterministic for a given query and draw.
    """
    names = ", ".join(drawn.card.name for drawn in cards)
    themes = ", ".join(keyword for drawn in cards for keyword in drawn.keywords)
    return (
        f"{FALLBACK_INTRO} You asked: '{query}'. The cards drawn are: {names}. "
        f"The key themes here are {themes}. Advice: {FALLBACK_ADVICE}"
    )


class Interpreter:
    """
    Narrates readings through the Anthropic Messages API.

    One instance is shared by all connections; the underlying client is
    created on first use.
    """

    def __init__(
        self,
        api_key: str = "",
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 1024,
        client: anthropic.AsyncAnthropic | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self._client = client

    @classmethod
    def from_settings(cls) -> "Interpreter":
        return cls(
            api_key=settings.anthropic_api_key,
            model=settings.interpretation_model,
            max_tokens=settings.interpretation_max_tokens,
        )

    def _get_client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key)
        return self._client

    async def interpret(self, query: str, cards: Sequence[DrawnCard]) -> str:
        """
        Narrate a reading.

        Returns the model's narration, or the local fallback if it could not
        be produced.
        """
        try:
            return await self._generate(query, cards)
        except InterpretationError as e:
            logger.warning("Using fallback interpretation: %s", e.message)
        except anthropic.APIError as e:
            logger.error("Interpretation request failed: %s", e)
        except Exception:
            logger.exception("Unexpected interpretation failure")

        return fallback_interpretation(query, cards)

    async def _generate(self, query: str, cards: Sequence[DrawnCard]) -> str:
        if not self.api_key and self._client is None:
            raise InterpretationError("Anthropic API key not configured")

        messages: list[MessageParam] = [
            {"role": "user", "content": build_user_message(query, cards)},
        ]
        response = await self._get_client().messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=SYSTEM_PROMPT,
            messages=messages,
        )

        if response.usage:
            logger.info(
                "interpretation_token_usage",
                extra={
                    "input_tokens": response.usage.input_tokens,
                    "output_tokens": response.usage.output_tokens,
                },
            )

        text = "".join(block.text for block in response.content if isinstance(block, TextBlock))
        if not text.strip():
            raise InterpretationError("Empty interpretation response")
        return text
