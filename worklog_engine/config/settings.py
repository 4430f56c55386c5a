import os

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    openai_api_key: str = Field(default="", validation_alias="OPENAI_API_KEY", validate_default=True)
    llm_provider: str = Field(default="openai", validation_alias="LLM_PROVIDER")
    llm_model: str = Field(default="gpt-4o-mini", validation_alias="LLM_MODEL")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")
    log_json: bool = Field(default=False, validation_alias="LOG_JSON")
    max_batch_size: int = Field(
        default=50,
        gt=0,
        validation_alias="DISTRIBUTION_MAX_BATCH_SIZE",
        description="Maximum number of worklogs accepted by one distribution call",
    )
    scoring_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias="SCORING_TIMEOUT_SECONDS",
        description="Upper bound on a single complexity scoring call",
    )
    fallback_chars_per_point: int = Field(
        default=20,
        gt=0,
        validation_alias="FALLBACK_CHARS_PER_POINT",
        description="Comment characters per complexity point when scoring falls back to comment length",
    )
    default_target_hours: float = Field(
        default=8.0,
        gt=0,
        le=24,
        validation_alias="DEFAULT_TARGET_HOURS",
        description="Daily target used when the caller does not supply one",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(valid_levels)}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("openai_api_key")
    @classmethod
    def validate_openai_api_key(cls, value: str) -> str:
        """Warn when smart distribution cannot reach the LLM.

        Smart distribution still works without a key: scoring fails and the
        comment-length fallback takes over.
        """
        if not value and not os.getenv("OPENAI_API_KEY"):
            logger.warning(
                "OPENAI_API_KEY is not set. Smart distribution will fall back to comment-length scoring."
            )
        return value


settings = Settings()
