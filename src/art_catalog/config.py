"""Configuration settings for ArtCatalog."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── History ──────────────────────────────────────────────────────────────
    # Number of undo steps kept by the snapshot history; older checkpoints
    # are evicted first.
    undo_history_limit: int = 100

    # Number of entries kept by a CommandRecord
    command_history_limit: int = 100

    # ── Query language ───────────────────────────────────────────────────────
    # Literal format for after:/before: conditions
    query_date_format: str = "%m/%d/%Y"

    # Deepest nesting of parentheses and negations accepted in a query
    query_max_nesting: int = 32

    # ── Storage ──────────────────────────────────────────────────────────────
    # Catalog file name inside a catalog directory (CLI only)
    catalog_file: str = "data.json"

    # Root log level installed by the CLI
    log_level: str = "WARNING"


settings = Settings()
