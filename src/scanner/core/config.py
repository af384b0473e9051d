from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_name: str = "Scanner Session API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # API Keys: Mapping von API-Key zu Operator-ID (JSON-String als Env-Var)
    # Format: '{"key_abc123": "operator_alice", "key_xyz789": "operator_bob"}'
    api_keys: dict[str, str] = Field(default_factory=dict)

    # Catalog
    catalog_backend: Literal["firestore", "sql", "memory"] = "firestore"
    catalog_collection: str = "inventario"
    catalog_timeout_seconds: float = 15.0
    firestore_project_id: str = ""
    firestore_database: str = "(default)"

    # Log sink
    log_sink_backend: Literal["realtime_database", "sql", "memory"] = "realtime_database"
    realtime_database_url: str = ""
    log_sink_key: str = "codigo"

    # SQL backends (Katalog und/oder Log-Senke)
    database_url: str = "sqlite+aiosqlite:///./scanner.db"

    # External HTTP
    http_timeout_seconds: float = 10.0

    # CORS
    cors_origins: list[str] = Field(default=["*"])

    # Rate Limiting
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 60

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
