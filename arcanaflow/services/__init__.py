from arcanaflow.services.card_catalog import CardCatalog, get_card_catalog, load_catalog
from arcanaflow.services.interpretation import Interpreter, fallback_interpretation
from arcanaflow.services.reading_store import ReadingStore
from arcanaflow.services.weighted_drawer import draw_cards

__all__ = [
    "CardCatalog",
    "Interpreter",
    "ReadingStore",
    "draw_cards",
    "fallback_interpretation",
    "get_card_catalog",
    "load_catalog",
]
