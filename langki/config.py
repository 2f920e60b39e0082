"""
Configuration settings for langki.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from langki.llm.client import ModelConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # OpenAI credentials
    # ========================================
    openai_api_key: str = Field(
        default="",
        description="OpenAI API key",
    )
    openai_organization: str = Field(
        default="",
        description="Optional OpenAI organization ID (org-...)",
    )
    openai_project: str = Field(
        default="",
        description="Optional OpenAI project ID (proj_...)",
    )
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL of the Responses API",
    )

    # ========================================
    # Model call defaults
    # ========================================
    ai_model: str = Field(
        default="gpt-5-mini",
        description="Model used for every generation call",
    )
    ai_effort: Literal["minimal", "low", "medium", "high"] = Field(
        default="low",
        description="Reasoning effort sent with each request",
    )
    ai_tier: Literal["auto", "default", "flex", "priority"] = Field(
        default="auto",
        description="Service tier sent with each request",
    )
    ai_timeout_seconds: float = Field(
        default=60.0,
        description="HTTP timeout for a single model call",
    )

    # ========================================
    # Generation
    # ========================================
    native_language: str = Field(
        default="German",
        description="Language meanings are written in",
    )
    freq_list_dir: str = Field(
        default="freqLists",
        description="Directory holding <language>.tsv frequency lists",
    )
    edit_instruction_max_chars: int = Field(
        default=500,
        description="Longest accepted free-form edit instruction",
    )
    suggest_max_count: int = Field(
        default=50,
        description="Upper bound for vocabulary suggestions per request",
    )

    # ========================================
    # Anki Integration
    # ========================================
    anki_connect_url: str = Field(
        default="http://127.0.0.1:8765",
        description="AnkiConnect plugin URL",
    )
    anki_deck_name: str = Field(
        default="Thai",
        description="Target deck, also used as the language name",
    )
    anki_note_type: str = Field(
        default="Langki Language",
        description="Note type for regular cards",
    )
    anki_reversed_note_type: str = Field(
        default="Langki Language REVERSED",
        description="Note type for reversed cards",
    )
    anki_word_field: str = Field(
        default="Word",
        description="Note field holding the vocabulary term",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    @field_validator("openai_api_key", "openai_organization", "openai_project")
    @classmethod
    def _strip_credentials(cls, value: str) -> str:
        return value.strip()

    # ========================================
    # Helper Methods
    # ========================================
    def model_config_value(self) -> ModelConfig:
        """Build the per-call model configuration from settings."""
        from langki.llm.client import ModelConfig

        return ModelConfig(
            model=self.ai_model,
            effort=self.ai_effort,
            tier=self.ai_tier,
        )

    def has_ai_configured(self) -> bool:
        """Check if an OpenAI key is available."""
        return bool(self.openai_api_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
