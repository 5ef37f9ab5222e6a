"""Application configuration settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="READALL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Readall"
    debug: bool = False
    host: str = "127.0.0.1"
    port: int = 8000

    # Storage
    documents_path: str = "./data/documents"

    # Logging
    log_level: str = "INFO"
    log_dir: str = "./logs"
    enable_file_logging: bool = False

    # Pacing
    default_wpm: int = 350
    lookahead_window: int = 50

    # Enrichment (OpenRouter chat completions)
    enrichment_url: str = "https://openrouter.ai/api/v1/chat/completions"
    enrichment_model: str = "gpt-oss-120b"
    enrichment_timeout_seconds: float = 30.0
    enrichment_segment_limit: int = 2500
    enrichment_delay_seconds: float = 2.0

    # Priming summary
    priming_min_chars: int = 500
    priming_word_limit: int = 2000

    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""
    return Settings()
