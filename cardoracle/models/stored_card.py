import json
from dataclasses import asdict, dataclass
from typing import Any

from cardoracle.models.card import ScryfallCard


@dataclass(frozen=True, slots=True)
class StoredCard:
    """
    Flattened projection of a card for the collection store.

    The store does not model nested maps, so legalities and prices are
    kept as JSON text. Optional text fields are empty strings, never None.

    Attributes:
        scryfall_id: Unique printing identifier (also the store object UUID)
        oracle_id: Identifier shared by all printings, "" when absent
        legalities_json: JSON object of format -> legality status
        prices_json: JSON object of price category -> price string or null
    """

    scryfall_id: str
    oracle_id: str
    name: str
    type_line: str
    oracle_text: str
    mana_cost: str
    cmc: float
    colors: list[str]
    color_identity: list[str]
    keywords: list[str]
    power: str
    toughness: str
    loyalty: str
    defense: str
    set: str
    set_name: str
    rarity: str
    collector_number: str
    flavor_text: str
    artist: str
    layout: str
    legalities_json: str
    prices_json: str

    @classmethod
    def from_card(cls, card: ScryfallCard) -> "StoredCard":
        """Map a validated card to its storage shape."""
        return cls(
            scryfall_id=str(card.id),
            oracle_id=str(card.oracle_id) if card.oracle_id else "",
            name=card.name,
            type_line=card.type_line,
            oracle_text=card.oracle_text or "",
            mana_cost=card.mana_cost or "",
            cmc=float(card.cmc),
            colors=list(card.colors or []),
            color_identity=list(card.color_identity),
            keywords=list(card.keywords),
            power=card.power or "",
            toughness=card.toughness or "",
            loyalty=card.loyalty or "",
            defense=card.defense or "",
            set=card.set,
            set_name=card.set_name,
            rarity=card.rarity,
            collector_number=card.collector_number,
            flavor_text=card.flavor_text or "",
            artist=card.artist or "",
            layout=card.layout,
            legalities_json=json.dumps(card.legalities),
            prices_json=json.dumps(card.prices),
        )

    def to_properties(self) -> dict[str, Any]:
        """Property dict for the store."""
        return asdict(self)
