"""Application settings."""

from __future__ import annotations

import json
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration entrypoint for the gate service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True

    # Observability
    log_level: str = "INFO"
    json_logs: bool = True

    # Supabase project the gate fronts
    supabase_url: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_URL"),
    )
    supabase_anon_key: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_ANON_KEY", "SUPABASE_KEY"),
    )

    # Local development without a Supabase project
    use_in_memory_backend: bool = Field(
        default=False,
        validation_alias=AliasChoices("USE_IN_MEMORY_BACKEND"),
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Routing
    functions_prefix: str = "/functions/v1"

    # CORS (edge function defaults)
    cors_allow_origin: str = "*"
    cors_allow_headers: list[str] = [
        "authorization",
        "x-client-info",
        "apikey",
        "content-type",
    ]

    @field_validator("cors_allow_headers", mode="before")
    @classmethod
    def parse_allow_headers(cls, value: str | list[str] | None) -> list[str]:
        """Normalize CORS_ALLOW_HEADERS env input into a list."""
        if isinstance(value, list):
            return value
        if isinstance(value, str):
            raw = value.strip()
            if not raw:
                return []
            if raw.startswith("["):
                try:
                    parsed = json.loads(raw)
                    if isinstance(parsed, list):
                        return parsed
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in raw.split(",") if item.strip()]
        return []

    @property
    def is_production(self) -> bool:
        """Return True when running in production."""
        return self.environment == "production"

    @property
    def has_supabase_credentials(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


settings = Settings()
