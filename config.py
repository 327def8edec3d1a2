"""
Configuration settings for the tense prioritizer.

Uses Pydantic Settings for environment variable management with .env file support.
Scoring tables are data in src/prioritizer/constants.py; this module only holds
result sizes, selection cut-offs and logging options.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PRIORITIZER_",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Learner Defaults
    # ========================================
    default_level: Literal["A1", "A2", "B1", "B2", "C1", "C2"] = Field(
        default="A1",
        description="CEFR level assumed by the CLI when none is given",
    )

    # ========================================
    # Result Sizes
    # ========================================
    progression_path_limit: int = Field(
        default=10,
        ge=1,
        description="Maximum number of tenses returned by the progression path",
    )
    review_limit: int = Field(
        default=10,
        ge=1,
        description="Maximum number of review tenses per prioritization",
    )
    exploration_limit: int = Field(
        default=3,
        ge=0,
        description="Maximum number of next-level preview tenses",
    )

    # ========================================
    # Selection Cut-offs
    # ========================================
    review_mastery_ceiling: float = Field(
        default=80.0,
        ge=0.0,
        le=100.0,
        description="Earlier-level tenses below this mastery are queued for review",
    )
    exploration_min_readiness: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Minimum exploration readiness for a next-level preview",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
