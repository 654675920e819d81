from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "ArcanaFlow"
    debug: bool = False

    database_url: str = "sqlite+aiosqlite:///./arcanaflow.db"

    # Empty key means every reading uses the local fallback narration
    anthropic_api_key: str = ""
    interpretation_model: str = "claude-sonnet-4-20250514"
    interpretation_max_tokens: int = 1024

    # None loads the bundled 78-card catalog
    catalog_path: Path | None = None

    outbound_queue_size: int = 32
    chunk_delay_ms: int = 100


settings = Settings()
