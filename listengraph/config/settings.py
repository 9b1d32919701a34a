"""Application settings loaded from environment variables via pydantic-settings.

Values are read from (highest priority first):

    1. Environment variables, e.g. ``LISTENS_DB_PATH=/srv/listens.db``
    2. A ``.env`` file in the working directory
    3. The defaults below

Field ``listens_db_path`` maps to env var ``LISTENS_DB_PATH``.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """listengraph application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Storage ===
    listens_db_path: str = "data/listens.db"

    # === Genre lookup ===
    config_path: str = "config/config.yaml"
    genre_cache_enabled: bool = True
    genre_cache_max_size: int = 5000
    genre_cache_ttl: int = 3600

    # === Network defaults (overridable per request) ===
    network_min_play_count: int = 1
    network_max_artists: int | None = None
    network_proximity_window_minutes: float = 30
    network_min_edge_weight: float = 1

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"
