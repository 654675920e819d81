"""Tests for the card catalog loader."""

import json
from pathlib import Path
from typing import Any

import pytest

from arcanaflow.models.card import Arcana
from arcanaflow.models.failure import CatalogLoadError, FailureKind
from arcanaflow.services.card_catalog import (
    STANDARD_DECK_SIZE,
    CardCatalog,
    load_catalog,
    parse_card,
)


def _record(card_id: str = "the_fool", **overrides: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": card_id,
        "name": "The Fool",
        "arcana": "major",
        "suit": None,
        "number": 0,
        "archetype": "The Innocent",
        "keywords": {"upright": ["beginnings"], "reversed": ["recklessness"]},
        "situational_tags": ["new", "start"],
    }
    record.update(overrides)
    return record


def _write(tmp_path: Path, payload: Any) -> Path:
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(payload))
    return path


class TestBundledCatalog:
    def test_has_full_deck(self, catalog: CardCatalog) -> None:
        """Bundled catalog holds the standard 78 cards."""
        assert len(catalog) == STANDARD_DECK_SIZE

    def test_ids_unique(self, catalog: CardCatalog) -> None:
        """Every card id appears once."""
        ids = [card.id for card in catalog]
        assert len(set(ids)) == len(ids)

    def test_arcana_split(self, catalog: CardCatalog) -> None:
        """22 major arcana and 14 cards in each of four suits."""
        majors = [card for card in catalog if card.arcana is Arcana.MAJOR]
        assert len(majors) == 22
        assert all(card.suit is None for card in majors)

        for suit in ("wands", "cups", "swords", "pentacles"):
            assert len([card for card in catalog if card.suit == suit]) == 14

    def test_keyword_sets_non_empty(self, catalog: CardCatalog) -> None:
        """Both orientations have keywords for every card."""
        for card in catalog:
            assert card.keywords.upright
            assert card.keywords.reversed

    def test_lookup_by_id_and_position(self, catalog: CardCatalog) -> None:
        """Cards are reachable by position and by id."""
        assert catalog[0].id == "the_fool"
        assert catalog.get("the_fool") is catalog[0]
        assert catalog.get("not_a_card") is None


class TestParseCard:
    def test_parses_record(self) -> None:
        """A valid record becomes a TarotCard."""
        card = parse_card(_record())

        assert card.id == "the_fool"
        assert card.arcana is Arcana.MAJOR
        assert card.keywords.upright == ("beginnings",)
        assert card.situational_tags == ("new", "start")

    def test_tags_optional(self) -> None:
        """Missing situational tags default to none."""
        record = _record()
        del record["situational_tags"]

        assert parse_card(record).situational_tags == ()

    def test_missing_field(self) -> None:
        """A record without a name is rejected."""
        record = _record()
        del record["name"]

        with pytest.raises(CatalogLoadError) as exc_info:
            parse_card(record)

        assert exc_info.value.kind == FailureKind.CATALOG_INVALID

    def test_unknown_arcana(self) -> None:
        """Arcana must be major or minor."""
        with pytest.raises(CatalogLoadError):
            parse_card(_record(arcana="middle"))

    def test_empty_keywords(self) -> None:
        """An empty keyword set is rejected."""
        with pytest.raises(CatalogLoadError, match="keywords.upright"):
            parse_card(_record(keywords={"upright": [], "reversed": ["x"]}))

    def test_non_integer_number(self) -> None:
        """Card number must be an integer."""
        with pytest.raises(CatalogLoadError):
            parse_card(_record(number="zero"))

    def test_boolean_number_rejected(self) -> None:
        """Booleans are not card numbers."""
        with pytest.raises(CatalogLoadError, match="number"):
            parse_card(_record(number=True))

    def test_non_object_record(self) -> None:
        with pytest.raises(CatalogLoadError):
            parse_card(["the_fool"])


class TestLoadCatalog:
    def test_loads_file_in_order(self, tmp_path: Path) -> None:
        """Cards keep file order."""
        path = _write(tmp_path, [_record("a"), _record("b"), _record("c")])

        catalog = load_catalog(path)

        assert [card.id for card in catalog] == ["a", "b", "c"]

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file is a load error."""
        with pytest.raises(CatalogLoadError, match="not found"):
            load_catalog(tmp_path / "nope.json")

    def test_corrupted_json(self, tmp_path: Path) -> None:
        """Invalid JSON is a load error."""
        path = tmp_path / "catalog.json"
        path.write_text("[{not json")

        with pytest.raises(CatalogLoadError, match="corrupted"):
            load_catalog(path)

    def test_not_a_list(self, tmp_path: Path) -> None:
        """Top level must be a list of records."""
        path = _write(tmp_path, {"cards": []})

        with pytest.raises(CatalogLoadError):
            load_catalog(path)

    def test_invalid_record_names_position(self, tmp_path: Path) -> None:
        """The error points at the offending record and field."""
        broken = _record("b")
        del broken["archetype"]
        path = _write(tmp_path, [_record("a"), broken])

        with pytest.raises(CatalogLoadError, match=r"1\.archetype"):
            load_catalog(path)

    def test_duplicate_ids(self, tmp_path: Path) -> None:
        """Duplicate ids are rejected."""
        path = _write(tmp_path, [_record("a"), _record("a")])

        with pytest.raises(CatalogLoadError, match="Duplicate"):
            load_catalog(path)


class TestCardCatalog:
    def test_duplicate_ids_rejected(self, card_factory) -> None:
        """Catalog construction enforces unique ids."""
        with pytest.raises(CatalogLoadError):
            CardCatalog((card_factory("x"), card_factory("x")))

    def test_cards_shared_by_reference(self, card_factory) -> None:
        """Positional lookup returns the stored instance."""
        card = card_factory("x")
        catalog = CardCatalog((card,))

        assert catalog[0] is card
        assert catalog.cards == (card,)
