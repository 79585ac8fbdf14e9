from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "JustApply"
    app_env: str = "development"
    app_host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    log_file: Path | None = None

    data_dir: Path = Path("./data")
    download_dir: Path = Path("./data/downloads")

    database_url: str = "sqlite:///./data/justapply.db"
    local_storage_path: Path = Path("./data/local_storage.json")
    storage_backend: str = "auto"

    relay_base_url: str = "https://just-apply-backend.onrender.com"
    relay_timeout_sec: int = 60
    page_fetch_timeout_sec: int = 30

    max_upload_bytes: int = 5 * 1024 * 1024
    cors_origins: str = "*"

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, value: str) -> str:
        allowed = {"development", "staging", "production", "test"}
        if value not in allowed:
            raise ValueError(f"app_env must be one of {sorted(allowed)}")
        return value

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, value: str) -> str:
        allowed = {"auto", "database", "local"}
        if value not in allowed:
            raise ValueError(f"storage_backend must be one of {sorted(allowed)}")
        return value

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
