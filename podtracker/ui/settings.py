from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class UiSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    api_base_url: str = Field(
        default="http://localhost:4000",
        validation_alias=AliasChoices("POD_API_BASE_URL", "api_base_url"),
        description="Base URL of the POD tracker API.",
    )
    api_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        validation_alias=AliasChoices("POD_API_TIMEOUT_SECONDS", "api_timeout_seconds"),
    )
    poll_interval_seconds: int = Field(
        default=30,
        ge=5,
        validation_alias=AliasChoices("POLL_INTERVAL_SECONDS", "poll_interval_seconds"),
        description="How often the patient list is re-fetched to keep POD current.",
    )


@lru_cache
def get_ui_settings() -> UiSettings:
    return UiSettings()
