import json

from cardoracle.models import CardCollection, CardList, validate_card
from cardoracle.services.card_store import StoreHit, StoreStats
from cardoracle.services.formatting import (
    format_card_json,
    format_card_line,
    format_collection_results,
    format_search_results,
    format_store_hits,
    format_store_stats,
)


def make_list(cards: list[dict], total: int, has_more: bool) -> CardList:
    return CardList.model_validate(
        {"object": "list", "total_cards": total, "has_more": has_more, "data": cards}
    )


class TestCardLine:
    def test_includes_cost_and_permalink(self, lightning_bolt: dict) -> None:
        line = format_card_line(validate_card(lightning_bolt).unwrap())

        assert line == (
            "• Lightning Bolt (Magic 2010) - Instant [{R}]\n"
            "  Link: https://scryfall.com/card/m10/146"
        )

    def test_cost_omitted_when_absent(self, basic_land: dict) -> None:
        line = format_card_line(validate_card(basic_land).unwrap())

        assert line.startswith("• Wastes (Magic 2010) - Basic Land\n")
        assert "[" not in line


class TestSearchResults:
    def test_single_page(self, card_factory) -> None:
        text = format_search_results(make_list([card_factory(0), card_factory(1)], 2, False))

        assert text.startswith("Found 2 cards matching your search:\n\n")
        assert "Card 0" in text
        assert "Card 1" in text
        assert "Use page parameter" not in text

    def test_pagination_hint_uses_page_offset(self, card_factory) -> None:
        text = format_search_results(
            make_list([card_factory(0), card_factory(1)], 400, True), page=2
        )

        assert text.endswith(
            "Showing cards 176-177 of 400. Use page parameter to see more results."
        )

    def test_first_page_by_default(self, card_factory) -> None:
        text = format_search_results(make_list([card_factory(0)], 300, True))

        assert "Showing cards 1-1 of 300." in text


class TestCollectionResults:
    def test_found_and_not_found(self, card_factory) -> None:
        result = CardCollection.model_validate(
            {"data": [card_factory(0)], "not_found": [{"name": "Nope"}, {"id": "abc"}]}
        )

        text = format_collection_results(result, requested=3)

        assert text.startswith("Collection lookup results: Found 1 of 3 cards\n\n")
        assert "Found cards:\n• Card 0" in text
        assert "Not found (2):\n• Nope\n• Unknown card" in text

    def test_nothing_missing(self, card_factory) -> None:
        result = CardCollection.model_validate({"data": [card_factory(0)]})

        assert "Not found" not in format_collection_results(result, requested=1)


class TestCardJson:
    def test_only_sent_fields(self, basic_land: dict) -> None:
        data = json.loads(format_card_json(validate_card(basic_land).unwrap()))

        assert data["name"] == "Wastes"
        assert "mana_cost" not in data
        assert data["prices"]["usd_foil"] is None


class TestStoreOutput:
    def test_no_hits(self) -> None:
        assert format_store_hits("dragon", []) == 'No cards in the database matched "dragon".'

    def test_hits_with_distance(self) -> None:
        hits = [
            StoreHit(
                name="Shivan Dragon",
                type_line="Creature — Dragon",
                mana_cost="{4}{R}{R}",
                set_name="Magic 2010",
                oracle_text="Flying",
                distance=0.1234,
            )
        ]

        text = format_store_hits("dragon", hits)

        assert text.splitlines()[0] == 'Found 1 cards similar to "dragon":'
        assert text.splitlines()[2] == (
            "• Shivan Dragon (Magic 2010) - Creature — Dragon [{4}{R}{R}] (distance 0.123)"
        )

    def test_stats(self) -> None:
        text = format_store_stats(
            StoreStats(collections=["Oracle_Cards"], collection="Oracle_Cards", total_count=12)
        )

        assert "Collections (1): Oracle_Cards" in text
        assert "Cards in Oracle_Cards: 12" in text

    def test_stats_missing_collection(self) -> None:
        text = format_store_stats(StoreStats(collections=[], collection="Oracle_Cards"))

        assert "Collections (0): none" in text
        assert "Collection Oracle_Cards does not exist yet." in text
