from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "CardOracle"
    debug: bool = False
    log_level: str = "INFO"

    scryfall_api_url: str = "https://api.scryfall.com"
    scryfall_user_agent: str = "Card-Lookup-MCP-Server/1.0"
    # Seconds; applies to every outbound call
    request_timeout: float = 30.0

    weaviate_url: str = ""
    weaviate_api_key: str = ""
    weaviate_collection: str = "Oracle_Cards"
    weaviate_http_port: int = 443
    weaviate_grpc_port: int = 443

    # "lenient": a failed readiness check still marks the store connected
    # "strict": a failed readiness check fails connect()
    readiness_policy: Literal["lenient", "strict"] = "lenient"
    # Whether tools may query a store whose readiness check failed
    allow_unverified_queries: bool = True

    ingest_batch_size: int = 20
    # 0 keeps the drop-on-failure policy
    ingest_max_retries: int = 0

    static_dir: str = "cardoracle/static"


settings = Settings()


# =============================================================================
# SCRYFALL API LIMITS
# =============================================================================

# Cards per page returned by /cards/search
SEARCH_PAGE_SIZE = 175

# Maximum identifiers accepted by /cards/collection
MAX_COLLECTION_IDENTIFIERS = 75
