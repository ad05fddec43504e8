from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="BAGOFHOLDING_")

    app_name: str = "Bag of Holding"
    debug: bool = False
    log_level: str = "INFO"

    # Background threads used to run imports and matches off the event loop
    worker_threads: int = 2

    # Largest Helvault export accepted over HTTP (bytes)
    max_export_bytes: int = 256 * 1024 * 1024

    # Loaded exports kept per worker; the oldest is evicted past this
    max_sessions: int = 8

    default_query_limit: int = 100


settings = Settings()


# =============================================================================
# HELVAULT DEFAULTS
# =============================================================================

# Finish assumed for printings and copies that carry no finish label
DEFAULT_FINISH = "nonfoil"

# Colour symbols in canonical WUBRG order
COLOR_ORDER = ("W", "U", "B", "R", "G")
