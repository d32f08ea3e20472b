"""codesim application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """codesim console settings.

    All fields can be overridden via environment variables with
    the CODESIM_ prefix (e.g., CODESIM_ANALYSIS_BASE_URL).
    """

    analysis_base_url: str = "http://localhost:8080"
    request_timeout: float = 30.0
    library_page_size: int = 10
    compare_all_page_size: int = 100
    max_upload_bytes: int = 10 * 1024 * 1024
    session_header: str = "X-Session-ID"
    max_sessions: int = 1000
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["http://localhost:5173"]
    log_level: str = "INFO"
    behind_proxy: bool = False  # Set CODESIM_BEHIND_PROXY=true in Docker

    model_config = {
        "env_prefix": "CODESIM_",
        "env_file": ".env",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
