"""
Configuration management for the smart learning engine
"""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings with environment variable support"""

    # Learning pool
    initial_pool_size: int = Field(default=8, ge=1)
    new_words_per_expansion: int = Field(default=3, ge=1)
    expansion_threshold: float = Field(
        default=0.7, ge=0.0, le=1.0
    )  # share of pool that must be practiced or mastered

    # Mastery thresholds
    mastery_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    min_attempts_for_mastery: int = Field(default=5, ge=1)
    practiced_threshold: float = Field(default=0.6, ge=0.0, le=1.0)
    min_attempts_for_practiced: int = Field(default=3, ge=1)

    # Selection
    review_probability: float = Field(default=0.2, ge=0.0, le=1.0)

    # Application Configuration
    default_language: str = Field(default="italian")
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_prefix="SMART_LEARNING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure root logging from settings"""
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
