from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="CARDBINDER_")

    app_name: str = "cardbinder"
    debug: bool = False

    database_url: str = "sqlite+aiosqlite:///./cardbinder.db"

    # File path or http(s) URL of the built catalog artifact
    catalog_source: str = "data/catalog/onepiece_cards.json"

    card_api_base: str = "https://optcgapi.com"

    # Static gate; disabled unless both are set
    basic_auth_user: str = ""
    basic_auth_pass: str = ""

    # JSON list in the environment, e.g. '["http://localhost:3000"]'
    cors_origins: list[str] = ["*"]

    price_ttl_hours: float = 24.0
    scrape_delay_min: float = 0.35
    scrape_delay_max: float = 0.85
    http_timeout: float = 45.0


settings = Settings()


# =============================================================================
# IMPORT AND SEARCH LIMITS
# =============================================================================

# Collection CSV imports larger than this (data lines, header excluded) are rejected
MAX_IMPORT_LINES = 10_000

# Number of offending codes echoed back when import validation fails
INVALID_CODE_SAMPLE = 20

SEARCH_DEFAULT_LIMIT = 10
SEARCH_MAX_LIMIT = 100
