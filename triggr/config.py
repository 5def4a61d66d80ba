"""Application configuration using Pydantic Settings."""
from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables (and an optional .env file)."""

    # Application
    app_name: str = "Triggr"
    environment: str = "development"

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # "json" for production, "text" for development

    # Model gateway
    openai_api_key: str = ""
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    # Empty model names fall back to the gateway default ("gpt-4o-mini" or
    # "openai/gpt-4o-mini" depending on which key is set).
    default_agent_model: str = ""
    tool_config_model: str = ""
    codegen_model: str = "google/gemini-2.0-flash-001"
    codegen_temperature: float = 0.3
    codegen_max_tokens: int = 4000
    llm_timeout: float = 120.0

    # Chat execution loop
    tool_timeout: float = 30.0
    max_tool_rounds: int = 5

    # Kestra orchestrator
    kestra_url: str = "http://localhost:8080"
    kestra_username: str = "admin@kestra.io"
    kestra_password: str = "kestra"
    kestra_namespace: str = "triggr.workflows"
    kestra_timeout: float = 30.0

    # Database
    database_url: str = "sqlite+aiosqlite:///./triggr.db"
    db_echo: bool = False

    # Users
    new_user_token: int = 5000

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_sqlite(self) -> bool:
        return "sqlite" in self.database_url

    @property
    def has_llm_keys(self) -> bool:
        return bool(self.openai_api_key or self.openrouter_api_key)

    @property
    def kestra_base_url(self) -> str:
        return self.kestra_url.rstrip("/")

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_file=".env",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
