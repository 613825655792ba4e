"""
Scryfall card schema.

Describes what a trustworthy card record looks like. Every externally
sourced card (API responses, bulk exports) is validated against these
models before the rest of the system touches it.

Enumerated fields are closed sets: an unrecognized rarity, legality,
color or related-card component is a validation failure, never coerced.

Card objects: https://scryfall.com/docs/api/cards
"""

from typing import Any, Literal, get_args
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)

from cardoracle.models.validation import ValidationResult, validate_model

Color = Literal["W", "U", "B", "R", "G"]
Rarity = Literal["common", "uncommon", "rare", "mythic", "special", "bonus"]
LegalityStatus = Literal["legal", "not_legal", "restricted", "banned"]
RelatedComponent = Literal["token", "meld_part", "meld_result", "combo_piece"]

VALID_RARITIES: frozenset[str] = frozenset(get_args(Rarity))
VALID_LEGALITIES: frozenset[str] = frozenset(get_args(LegalityStatus))


class ScryfallModel(BaseModel):
    """
    Base for provider records: read-only, unknown keys ignored.

    Optional fields may be omitted but never sent as null; a null where the
    provider is expected to leave the key out is schema drift, not "absent".
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("must be omitted rather than null")
        return value


class ImageUris(ScryfallModel):
    """Image URLs Scryfall provides for a card or card face."""

    small: HttpUrl | None = None
    normal: HttpUrl | None = None
    large: HttpUrl | None = None
    png: HttpUrl | None = None
    art_crop: HttpUrl | None = None
    border_crop: HttpUrl | None = None


class CardFace(ScryfallModel):
    """One face of a multi-faced card (split, flip, transform, MDFC)."""

    object: Literal["card_face"]
    name: StrictStr
    mana_cost: StrictStr
    type_line: StrictStr | None = None
    oracle_text: StrictStr | None = None
    colors: list[Color] | None = None
    color_indicator: list[Color] | None = None
    power: StrictStr | None = None
    toughness: StrictStr | None = None
    loyalty: StrictStr | None = None
    defense: StrictStr | None = None
    artist: StrictStr | None = None
    artist_id: UUID | None = None
    illustration_id: UUID | None = None
    image_uris: ImageUris | None = None
    flavor_text: StrictStr | None = None
    printed_name: StrictStr | None = None
    printed_text: StrictStr | None = None
    printed_type_line: StrictStr | None = None
    watermark: StrictStr | None = None


class RelatedCard(ScryfallModel):
    """A card closely related to another (tokens, meld pieces, combo pieces)."""

    object: Literal["related_card"]
    id: UUID
    component: RelatedComponent
    name: StrictStr
    type_line: StrictStr
    uri: HttpUrl


class ScryfallCard(ScryfallModel):
    """
    A single card printing.

    `color_identity` is always present (possibly empty) while `colors` may
    be absent entirely, e.g. for lands and multi-faced cards.
    Power, toughness, loyalty and defense are strings because they may be
    non-numeric ("*", "1+*").
    """

    # Core card fields
    id: UUID
    lang: StrictStr
    object: Literal["card"]
    oracle_id: UUID | None = None
    layout: StrictStr

    # Gameplay fields
    name: StrictStr
    printed_name: StrictStr | None = None
    type_line: StrictStr
    oracle_text: StrictStr | None = None
    mana_cost: StrictStr | None = None
    cmc: StrictFloat | StrictInt
    colors: list[Color] | None = None
    color_identity: list[Color]
    keywords: list[StrictStr]
    power: StrictStr | None = None
    toughness: StrictStr | None = None
    loyalty: StrictStr | None = None
    defense: StrictStr | None = None

    card_faces: list[CardFace] | None = None
    all_parts: list[RelatedCard] | None = None
    image_uris: ImageUris | None = None

    # Set and rarity
    rarity: Rarity
    set: StrictStr
    set_name: StrictStr
    collector_number: StrictStr
    flavor_text: StrictStr | None = None
    artist: StrictStr | None = None

    # Prices and legality
    prices: dict[str, StrictStr | None]
    legalities: dict[str, LegalityStatus]


class CardList(ScryfallModel):
    """A page of search results."""

    object: Literal["list"]
    total_cards: StrictInt
    has_more: StrictBool
    next_page: HttpUrl | None = None
    data: list[ScryfallCard]


class NotFoundIdentifier(BaseModel):
    """An identifier from a collection request that matched no card."""

    model_config = ConfigDict(extra="allow", frozen=True)

    name: StrictStr | None = None


class CardCollection(ScryfallModel):
    """Response of /cards/collection."""

    data: list[ScryfallCard]
    not_found: list[NotFoundIdentifier] = Field(default_factory=list)


def validate_card(raw: Any) -> ValidationResult[ScryfallCard]:
    """Validate a single card object."""
    return validate_model(ScryfallCard, raw)


def validate_card_list(raw: Any) -> ValidationResult[CardList]:
    """Validate a search results envelope."""
    return validate_model(CardList, raw)


def validate_card_collection(raw: Any) -> ValidationResult[CardCollection]:
    """Validate a collection lookup envelope."""
    return validate_model(CardCollection, raw)
