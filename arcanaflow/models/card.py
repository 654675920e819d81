from dataclasses import dataclass
from enum import Enum
from typing import Any


class Arcana(str, Enum):
    """Major/minor classification of a card."""

    MAJOR = "major"
    MINOR = "minor"


@dataclass(frozen=True, slots=True)
class Keywords:
    """
    Keyword sets for each orientation.

    Both sequences are ordered and non-empty for every card in a catalog.
    """

    upright: tuple[str, ...]
    reversed: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class TarotCard:
    """
    A card definition from the catalog.

    Attributes:
        id: Unique identifier within the catalog (e.g., "the_fool")
        name: Display name (e.g., "The Fool")
        arcana: Major or minor arcana
        suit: Suit for minor arcana (wands, cups, swords, pentacles)
        number: Ordinal within the arcana or suit (Ace = 1, King = 14)
        archetype: Archetype label (e.g., "The Innocent")
        keywords: Upright and reversed keyword sets
        situational_tags: Short labels matched against query terms
    """

    id: str
    name: str
    arcana: Arcana
    suit: str | None
    number: int
    archetype: str
    keywords: Keywords
    situational_tags: tuple[str, ...] = ()

    def keywords_for(self, is_reversed: bool) -> tuple[str, ...]:
        """Keywords for the given orientation."""
        return self.keywords.reversed if is_reversed else self.keywords.upright

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "arcana": self.arcana.value,
            "suit": self.suit,
            "number": self.number,
            "archetype": self.archetype,
            "keywords": {
                "upright": list(self.keywords.upright),
                "reversed": list(self.keywords.reversed),
            },
            "situational_tags": list(self.situational_tags),
        }


@dataclass(frozen=True, slots=True)
class DrawnCard:
    """
    A card drawn for a reading.

    The card is a shared reference into the catalog, never a copy.
    position_index records draw order within one draw call, not the
    card's catalog position.
    """

    card: TarotCard
    is_reversed: bool
    position_index: int

    @property
    def keywords(self) -> tuple[str, ...]:
        """Keywords for the drawn orientation."""
        return self.card.keywords_for(self.is_reversed)

    def to_dict(self) -> dict[str, Any]:
        return {
            "card": self.card.to_dict(),
            "is_reversed": self.is_reversed,
            "position_index": self.position_index,
        }
