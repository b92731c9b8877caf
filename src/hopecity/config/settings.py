from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="HOPECITY_")

    # Remote store. When unset, every read and write uses the local blob.
    database_url: str | None = None

    # Local persisted blob (configuration fallback + operator PIN)
    storage_path: Path = Path("./local_storage.json")

    # Hosted identity provider (password sessions, admin invites)
    identity_url: str | None = None
    identity_anon_key: str | None = None
    identity_service_key: str | None = None

    # Prayer assistant
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.0-flash"

    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:5174"]
    log_json: bool = True
    log_level: str = "INFO"

    @property
    def remote_configured(self) -> bool:
        """True when the remote store connection variables are present."""
        return bool(self.database_url and self.database_url.strip())

    @property
    def sync_database_url(self) -> str | None:
        """``database_url`` with the async driver swapped for psycopg2 (Alembic)."""
        if not self.remote_configured:
            return None
        return self.database_url.replace("+asyncpg", "+psycopg2").replace("+aiosqlite", "")

    @property
    def identity_configured(self) -> bool:
        return bool(self.identity_url and self.identity_anon_key)


@lru_cache
def get_settings() -> Settings:
    return Settings()
