from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "manabox-mcp"
    debug: bool = False

    database_url: str = "sqlite+aiosqlite:///manabox.db"

    # ManaBox CSV export loaded at startup
    data_path: str | None = None

    host: str = "0.0.0.0"
    port: int = 3000

    log_level: str = "INFO"

    scryfall_api_url: str = "https://api.scryfall.com"
    scryfall_user_agent: str = "manabox-mcp/1.0.0"
    # Scryfall asks clients to keep 50-100ms between requests
    scryfall_min_interval_ms: int = 100
    scryfall_retry_delay_ms: int = 1000
    scryfall_timeout: float = 30.0


settings = Settings()


# =============================================================================
# SEARCH LIMITS
# =============================================================================

# Distinct card names returned by search_cards when no limit is given
DEFAULT_SEARCH_LIMIT = 5

# Upper bound accepted by the search_cards tool
MAX_SEARCH_LIMIT = 50

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
