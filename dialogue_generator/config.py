"""Application settings loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strongly typed application configuration."""

    gemini_api_key: str | None = Field(default=None, alias="GEMINI_API_KEY")
    generation_model: str = Field(default="gemini-1.5-flash", alias="GENERATION_MODEL")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_BASE_URL",
    )
    generation_timeout: float = Field(default=30.0, alias="GENERATION_TIMEOUT")
    copy_feedback_seconds: float = Field(
        default=2.0, alias="COPY_FEEDBACK_SECONDS", description="Seconds"
    )
    ws_inactivity_timeout: float = Field(
        default=600.0, alias="WS_INACTIVITY_TIMEOUT", description="Seconds"
    )
    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: Literal["debug", "info", "warning", "error", "critical"] = Field(
        default="info", alias="LOG_LEVEL"
    )
    host: str = Field(default="127.0.0.1", alias="HOST")
    port: int = Field(default=8000, alias="PORT")

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, populate_by_name=True
    )

    @property
    def has_api_key(self) -> bool:
        return bool(self.gemini_api_key and self.gemini_api_key.strip())


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of settings."""

    return Settings()
