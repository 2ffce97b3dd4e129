from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Bank Back Office API"
    database_url: str = "sqlite:///bank_backoffice.db"
    log_level: str = "INFO"
    recent_transactions_limit: int = 10
    account_number_max_attempts: int = 10

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BANK_",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
