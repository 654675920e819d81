"""
Validate the tarot card catalog.

Run this job after editing the catalog file to check it loads and holds a
complete deck. Uses CATALOG_PATH when set, otherwise the bundled catalog.
"""

import logging
from collections import Counter
from pathlib import Path

from arcanaflow.config import settings
from arcanaflow.models.card import Arcana
from arcanaflow.services.card_catalog import STANDARD_DECK_SIZE, load_catalog

logger = logging.getLogger(__name__)


def run_check(path: Path | None = None) -> Counter[str]:
    """
    Load the catalog and count its cards by arcana and suit.

    Returns:
        Counter keyed by "major" and by suit name for minor cards
    """
    logger.info("Checking card catalog at %s", path or "bundled catalog")

    try:
        catalog = load_catalog(path)
    except Exception as e:
        logger.error("Failed to load card catalog: %s", e)
        raise

    counts: Counter[str] = Counter()
    for card in catalog:
        if card.arcana is Arcana.MAJOR:
            counts["major"] += 1
        else:
            counts[card.suit or "unknown"] += 1

    for group, count in sorted(counts.items()):
        logger.info("  %s: %d", group, count)

    if len(catalog) != STANDARD_DECK_SIZE:
        logger.warning(
            "Catalog has %d cards, expected %d", len(catalog), STANDARD_DECK_SIZE
        )
    else:
        logger.info("Catalog OK: %d cards", len(catalog))

    return counts


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    run_check(settings.catalog_path)


if __name__ == "__main__":
    main()
