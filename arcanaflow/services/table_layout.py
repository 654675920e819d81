"""
Presentation-only table geometry.

Generates the resting layout of the deck and the shuffle animation the
client plays. Nothing here affects which cards are drawn.
"""

import random

from arcanaflow.models.messages import CardPosition, Position, ShuffleStep

# Resting fan: each card is offset from the previous one
DECK_X_STEP = 0.5
DECK_Y_STEP = -0.2

# Shuffle scatter ranges
SCATTER_X_RANGE = (50.0, 150.0)
SCATTER_Y_RANGE = (-30.0, 30.0)
SCATTER_ROTATION_RANGE = (-15.0, 15.0)
SCATTER_DURATION_MS = (200, 400)


def layout_card_id(position: int) -> str:
    return f"card_{position}"


def deck_positions(deck_size: int) -> list[CardPosition]:
    """Face-down resting positions, one per catalog position."""
    return [
        CardPosition(
            card_id=layout_card_id(i),
            x=i * DECK_X_STEP,
            y=i * DECK_Y_STEP,
            rotation=0.0,
            is_face_up=False,
            z_index=i,
        )
        for i in range(deck_size)
    ]


def shuffle_sequence(deck_size: int, rng: random.Random) -> list[ShuffleStep]:
    """
    Scatter animation, one step per catalog position.

    Even positions fly left, odd positions fly right.
    """
    steps: list[ShuffleStep] = []
    for i in range(deck_size):
        side = -1.0 if i % 2 == 0 else 1.0
        steps.append(
            ShuffleStep(
                card_id=layout_card_id(i),
                from_=Position(x=0.0, y=0.0, rotation=0.0),
                to=Position(
                    x=side * rng.uniform(*SCATTER_X_RANGE),
                    y=rng.uniform(*SCATTER_Y_RANGE),
                    rotation=rng.uniform(*SCATTER_ROTATION_RANGE),
                ),
                duration_ms=rng.randrange(*SCATTER_DURATION_MS),
            )
        )
    return steps
