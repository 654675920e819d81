"""
Context-weighted card drawing.

Cards whose situational tags overlap the seeker's query are more likely to
be drawn. Drawing is without replacement: no catalog position appears twice
in one call.

The weighting is intentionally loose. A tag resonates with a query term when
either is a substring of the other, so both "job" and "jobless" resonate
with the tag "job". Boosts are additive and uncapped.

Selection is a linear weighted scan, O(count x catalog size). That is fine
for decks in the tens to low hundreds of cards.
"""

import random
from collections.abc import Sequence

from arcanaflow.models.card import DrawnCard, TarotCard
from arcanaflow.services.card_catalog import CardCatalog

BASE_WEIGHT = 1.0
RESONANCE_BOOST = 2.0
REVERSED_PROBABILITY = 0.3


def tokenize_query(query: str) -> list[str]:
    """Lowercase whitespace-separated terms."""
    return query.lower().split()


def resonance_weight(card: TarotCard, terms: Sequence[str]) -> float:
    """
    Selection weight of a card for the given query terms.

    Starts at BASE_WEIGHT and adds RESONANCE_BOOST once per tag that
    resonates with at least one term.
    """
    weight = BASE_WEIGHT
    for tag in card.situational_tags:
        tag_lower = tag.lower()
        if any(term in tag_lower or tag_lower in term for term in terms):
            weight += RESONANCE_BOOST
    return weight


def compute_weights(catalog: CardCatalog, query: str) -> list[float]:
    """Resonance weight of every card, in catalog order."""
    terms = tokenize_query(query)
    return [resonance_weight(card, terms) for card in catalog]


def _pick_weighted(remaining: list[int], weights: list[float], rng: random.Random) -> int:
    """
    Pick a position in ``remaining``.

    Returns the first position whose cumulative weight meets or exceeds a
    uniform draw from [0, total).
    """
    total = sum(weights[idx] for idx in remaining)
    target = rng.random() * total

    cumulative = 0.0
    for position, idx in enumerate(remaining):
        cumulative += weights[idx]
        if cumulative >= target:
            return position

    # Float rounding can leave target a hair above the final sum
    return len(remaining) - 1


def draw_cards(
    catalog: CardCatalog,
    query: str,
    count: int,
    rng: random.Random | None = None,
) -> list[DrawnCard]:
    """
    Draw cards weighted by how strongly they resonate with the query.

    Args:
        catalog: Cards to draw from
        query: The seeker's query text
        count: Number of cards wanted
        rng: Random source. Seed it for reproducible draws.

    Returns:
        min(count, len(catalog)) DrawnCards with distinct cards, in draw
        order. Empty when count <= 0.
    """
    if rng is None:
        rng = random.Random()

    if count <= 0:
        return []

    weights = compute_weights(catalog, query)
    remaining = list(range(len(catalog)))
    drawn: list[DrawnCard] = []

    for position_index in range(count):
        if not remaining:
            break

        card_idx = remaining.pop(_pick_weighted(remaining, weights, rng))

        # Orientation is its own random event, independent of the card
        is_reversed = rng.random() < REVERSED_PROBABILITY

        drawn.append(
            DrawnCard(
                card=catalog[card_idx],
                is_reversed=is_reversed,
                position_index=position_index,
            )
        )

    return drawn
