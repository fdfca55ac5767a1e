"""Configuration management for Trade Mentor using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class JournalSettings(BaseSettings):
    """Local trade journal storage."""

    model_config = SettingsConfigDict(
        env_prefix="TRADEMENTOR_JOURNAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    data_dir: Path = Path("~/.tradementor/journal")
    user: str = "default"
    instrument: str = "NIFTY"

    @property
    def resolved_data_dir(self) -> Path:
        """Data directory with ``~`` expanded."""
        return self.data_dir.expanduser()


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Keys
    anthropic_api_key: str = Field(default="", alias="ANTHROPIC_API_KEY")

    # Model configuration
    model: str = Field(default="claude-sonnet-4-5", alias="TRADEMENTOR_MODEL")
    temperature: float = Field(default=0.3, alias="TRADEMENTOR_TEMPERATURE")
    max_tokens: int = Field(default=4096, alias="TRADEMENTOR_MAX_TOKENS")

    # Logging
    log_level: str = Field(default="INFO", alias="TRADEMENTOR_LOG_LEVEL")

    # Retry
    api_retry_attempts: int = Field(default=3, alias="TRADEMENTOR_API_RETRY_ATTEMPTS")

    # Nested settings
    journal: JournalSettings = Field(default_factory=JournalSettings)

    @field_validator("anthropic_api_key", mode="before")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        if not v:
            return v
        if not v.startswith("sk-ant-"):
            raise ValueError("Invalid Anthropic API key format")
        return v

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        if not 0 <= v <= 1:
            raise ValueError("Temperature must be between 0 and 1")
        return v

    @property
    def prompts_dir(self) -> Path:
        """Get the prompts directory path."""
        return Path(__file__).parent / "prompts"

    @property
    def is_configured(self) -> bool:
        """Check if essential settings are configured."""
        return bool(self.anthropic_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
