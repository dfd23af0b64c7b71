"""Application configuration via environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables (ARCHREVIEW_*)."""

    # Logging
    DEBUG: bool = False
    LOG_LEVEL: str = "info"

    # Review policy file; empty means the built-in defaults
    POLICY_PATH: str = ""

    # Files validated in parallel by the CLI
    MAX_WORKERS: int = 4

    model_config = {"env_prefix": "ARCHREVIEW_", "env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
