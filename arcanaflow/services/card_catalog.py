"""
Card catalog service.

Loads the tarot card definitions once and serves them read-only.
"""

import json
from collections.abc import Iterator
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, StrictInt, TypeAdapter, ValidationError

from arcanaflow.config import settings
from arcanaflow.models.card import Arcana, Keywords, TarotCard
from arcanaflow.models.failure import CatalogLoadError

DATA_DIR = Path(__file__).parent.parent / "data"
DEFAULT_CATALOG_PATH = DATA_DIR / "tarot_data.json"

STANDARD_DECK_SIZE = 78


class CardCatalog:
    """
    Immutable, ordered collection of card definitions.

    Shared by reference across every connection; nothing mutates it after
    load, so reads need no synchronization.
    """

    __slots__ = ("_cards", "_by_id")

    def __init__(self, cards: tuple[TarotCard, ...]):
        by_id: dict[str, TarotCard] = {}
        for card in cards:
            if card.id in by_id:
                raise CatalogLoadError(f"Duplicate card id: {card.id}")
            by_id[card.id] = card
        self._cards = cards
        self._by_id = by_id

    @property
    def cards(self) -> tuple[TarotCard, ...]:
        return self._cards

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[TarotCard]:
        return iter(self._cards)

    def __getitem__(self, index: int) -> TarotCard:
        return self._cards[index]

    def get(self, card_id: str) -> TarotCard | None:
        """Look up a card by id. Returns None if unknown."""
        return self._by_id.get(card_id)


class KeywordsRecord(BaseModel):
    upright: list[str] = Field(min_length=1)
    reversed: list[str] = Field(min_length=1)


class CardRecord(BaseModel):
    """One entry of the catalog JSON file."""

    id: str = Field(min_length=1)
    name: str
    arcana: Arcana
    suit: str | None = None
    number: StrictInt
    archetype: str
    keywords: KeywordsRecord
    situational_tags: list[str] = Field(default_factory=list)

    def to_card(self) -> TarotCard:
        return TarotCard(
            id=self.id,
            name=self.name,
            arcana=self.arcana,
            suit=self.suit,
            number=self.number,
            archetype=self.archetype,
            keywords=Keywords(
                upright=tuple(self.keywords.upright),
                reversed=tuple(self.keywords.reversed),
            ),
            situational_tags=tuple(self.situational_tags),
        )


_card_records: TypeAdapter[list[CardRecord]] = TypeAdapter(list[CardRecord])


def _first_error(e: ValidationError) -> str:
    error = e.errors()[0]
    location = ".".join(str(part) for part in error["loc"])
    return f"{location}: {error['msg']}" if location else error["msg"]


def parse_card(record: Any) -> TarotCard:
    """
    Build a TarotCard from one catalog record.

    Raises:
        CatalogLoadError: If a field is missing, mistyped, or a keyword set
            is empty
    """
    try:
        return CardRecord.model_validate(record).to_card()
    except ValidationError as e:
        card_id = record.get("id") if isinstance(record, dict) else None
        raise CatalogLoadError(
            f"Card {card_id!r} is invalid: {_first_error(e)}", detail=str(e)
        ) from e


def load_catalog(path: Path | None = None) -> CardCatalog:
    """
    Load the card catalog from a JSON file.

    Args:
        path: Path to a JSON list of card records. Defaults to the bundled
            data/tarot_data.json

    Returns:
        CardCatalog in file order.

    Raises:
        CatalogLoadError: If the file is missing, is not valid JSON, or
            contains invalid or duplicate cards
    """
    if path is None:
        path = DEFAULT_CATALOG_PATH

    if not path.exists():
        raise CatalogLoadError(f"Card catalog not found at {path}")

    try:
        with open(path, encoding="utf-8") as f:
            records = json.load(f)
    except json.JSONDecodeError as e:
        raise CatalogLoadError(f"Card catalog at {path} is corrupted", detail=str(e)) from e

    try:
        parsed = _card_records.validate_python(records)
    except ValidationError as e:
        raise CatalogLoadError(
            f"Card catalog at {path} is invalid: {_first_error(e)}", detail=str(e)
        ) from e

    return CardCatalog(tuple(record.to_card() for record in parsed))


@lru_cache(maxsize=1)
def get_card_catalog() -> CardCatalog:
    """
    Get the process-wide card catalog.

    Cached after first load.

    Raises:
        CatalogLoadError: If the configured catalog cannot be loaded
    """
    return load_catalog(settings.catalog_path)
