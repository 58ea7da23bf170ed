from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Unity Hands"
    app_env: str = "development"
    app_host: str = "127.0.0.1"
    app_port: int = 3000
    log_level: str = "INFO"

    secret_key: str = "change-me"
    jwt_algorithm: str = "HS256"
    token_ttl_days: int = 30
    token_cookie_name: str = "token"

    database_url: str = "sqlite:///./data/unity_hands.db"
    data_dir: Path = Path("./data")

    cors_origins: str = "http://localhost:5173"

    events_patch_upsert: bool = False
    owner_listing_requires_token: bool = False

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, value: str) -> str:
        allowed = {"development", "staging", "production", "test"}
        if value not in allowed:
            raise ValueError(f"app_env must be one of {sorted(allowed)}")
        return value

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
