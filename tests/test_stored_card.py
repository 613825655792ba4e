import json
from typing import Any

from cardoracle.models import StoredCard, validate_card


class TestFromCard:
    def test_flattens_nested_maps_to_json(self, lightning_bolt: dict[str, Any]) -> None:
        record = StoredCard.from_card(validate_card(lightning_bolt).unwrap())

        assert json.loads(record.legalities_json) == lightning_bolt["legalities"]
        assert json.loads(record.prices_json) == {"usd": "0.50", "usd_foil": None, "eur": "0.40"}

    def test_uses_scryfall_id(self, lightning_bolt: dict[str, Any]) -> None:
        record = StoredCard.from_card(validate_card(lightning_bolt).unwrap())

        assert record.scryfall_id == lightning_bolt["id"]
        assert record.oracle_id == lightning_bolt["oracle_id"]

    def test_missing_optional_text_becomes_empty(self, basic_land: dict[str, Any]) -> None:
        record = StoredCard.from_card(validate_card(basic_land).unwrap())

        assert record.mana_cost == ""
        assert record.power == ""
        assert record.flavor_text == ""
        assert record.colors == []
        assert record.color_identity == []
        assert record.cmc == 0.0

    def test_properties_are_flat(self, lightning_bolt: dict[str, Any]) -> None:
        props = StoredCard.from_card(validate_card(lightning_bolt).unwrap()).to_properties()

        assert props["name"] == "Lightning Bolt"
        assert props["rarity"] == "common"
        assert all(not isinstance(value, dict) for value in props.values())
