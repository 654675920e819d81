"""
Shared FastAPI dependencies.

Process-wide collaborators live behind these functions so tests can swap
them through ``app.dependency_overrides``.
"""

from functools import lru_cache

from arcanaflow.services.card_catalog import CardCatalog, get_card_catalog
from arcanaflow.services.interpretation import Interpreter
from arcanaflow.services.reading_store import ReadingStore


def get_catalog() -> CardCatalog:
    return get_card_catalog()


@lru_cache
def get_interpreter() -> Interpreter:
    return Interpreter.from_settings()


@lru_cache
def get_reading_store() -> ReadingStore:
    return ReadingStore()
