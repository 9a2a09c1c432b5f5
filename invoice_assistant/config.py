"""Application configuration."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven settings validated at startup."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Optional so the relay can start and report the missing key per request.
    gemini_api_key: SecretStr | None = Field(default=None, alias="GEMINI_API_KEY")
    gemini_model: str = Field(default="gemini-2.5-flash", alias="GEMINI_MODEL")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta/models",
        alias="GEMINI_BASE_URL",
    )
    relay_url: str = Field(default="http://127.0.0.1:8000/api/gemini-proxy", alias="RELAY_URL")
    relay_host: str = Field(default="127.0.0.1", alias="RELAY_HOST")
    relay_port: int = Field(default=8000, alias="RELAY_PORT")
    database_path: Path = Field(default=Path("invoices.db"), alias="DATABASE_PATH")
    language: str = Field(default="en", alias="ASSISTANT_LANGUAGE", pattern="^(en|pt)$")
    request_timeout_seconds: float = Field(default=60.0, alias="REQUEST_TIMEOUT_SECONDS")
    max_function_call_rounds: int = Field(default=8, alias="MAX_FUNCTION_CALL_ROUNDS", ge=1)


def load_settings() -> Settings:
    """Load and validate settings."""

    return Settings()
