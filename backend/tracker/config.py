"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - store_path names the one store file; nothing else is persisted

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every setting: works out-of-the-box on a laptop
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Store
    store_path: str = "./track.db"

    # Listener
    host: str = "127.0.0.1"
    port: int = 3000

    # Request correlation
    request_id_header: str = "x-request-id"

    # Observability
    log_level: str = "DEBUG"
    log_format: str = "json"

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v

    @field_validator("request_id_header")
    @classmethod
    def lower_header(cls, v: str) -> str:
        """ASGI header names are lowercase."""
        return v.lower()


@lru_cache
def get_settings() -> Settings:
    return Settings()
