import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from pydantic import AnyHttpUrl, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class ConnecteamConfig(BaseModel):
    """Credentials for the workforce-scheduling provider, handed to its client."""

    api_key: str | None = None
    base_url: str = "https://api.connecteam.com"
    timeout_seconds: float = 15.0
    # Falls back to the first non-archived clock when unset
    time_clock_id: int | None = None


class Settings(BaseSettings):
    env: str = Field(default="dev", description="Deployment environment")
    app_name: str = "Cleaning Professionals Admin API"
    database_url: str = Field(
        default="postgresql://postgres:postgres@db:5432/cleanadmin",
        description="Database connection string",
    )
    cors_origins: Annotated[list[AnyHttpUrl], NoDecode] = []
    log_level: str = "INFO"
    sentry_dsn: str | None = Field(default=None, description="Sentry DSN for error monitoring")
    otlp_endpoint: str | None = Field(default=None, description="OTLP endpoint for traces/metrics")
    connecteam: ConnecteamConfig = Field(default_factory=ConnecteamConfig)

    model_config = SettingsConfigDict(
        env_prefix="CLEANADMIN_", env_nested_delimiter="__", extra="ignore"
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value: str | list[AnyHttpUrl]) -> list[AnyHttpUrl]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings(_env_file=get_settings_env_file())


def get_settings_env_file() -> str | None:
    """Resolve environment-specific env file if it exists."""
    env = os.getenv("CLEANADMIN_ENV", "dev")
    env_file = BASE_DIR / f".env.{env}"
    default_file = BASE_DIR / ".env"
    if env_file.exists():
        return str(env_file)
    if default_file.exists():
        return str(default_file)
    return None


settings = get_settings()
