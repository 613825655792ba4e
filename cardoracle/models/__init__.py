from cardoracle.models.card import (
    VALID_LEGALITIES,
    VALID_RARITIES,
    CardCollection,
    CardFace,
    CardList,
    ImageUris,
    NotFoundIdentifier,
    RelatedCard,
    ScryfallCard,
    validate_card,
    validate_card_collection,
    validate_card_list,
)
from cardoracle.models.failure import (
    BatchWriteError,
    ConfigurationError,
    FailureKind,
    KnownError,
    SchemaDriftError,
    StoreUnavailableError,
    ToolInputError,
    UpstreamError,
)
from cardoracle.models.stored_card import StoredCard
from cardoracle.models.validation import FieldIssue, ValidationResult, validate_model

__all__ = [
    "BatchWriteError",
    "CardCollection",
    "CardFace",
    "CardList",
    "ConfigurationError",
    "FailureKind",
    "FieldIssue",
    "ImageUris",
    "KnownError",
    "NotFoundIdentifier",
    "RelatedCard",
    "SchemaDriftError",
    "ScryfallCard",
    "StoreUnavailableError",
    "StoredCard",
    "ToolInputError",
    "UpstreamError",
    "VALID_LEGALITIES",
    "VALID_RARITIES",
    "ValidationResult",
    "validate_card",
    "validate_card_collection",
    "validate_card_list",
    "validate_model",
]
