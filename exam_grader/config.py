"""
Configuration management for the exam grader.

Uses Pydantic Settings for type-safe configuration loading from environment variables.
All configuration is validated at startup to fail fast on misconfiguration.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are validated at startup. Missing required fields
    will raise clear validation errors.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Grading Oracle Configuration
    # ==========================================================================
    together_api_key: str = Field(
        ...,
        description="API key for the OpenAI-compatible completions endpoint",
        min_length=10,
    )

    together_base_url: str = Field(
        default="https://api.together.xyz/v1",
        description="Base URL for the completions endpoint",
    )

    together_model: str = Field(
        default="meta-llama/Llama-3-8b-chat-hf",
        description="Model used to grade each answer",
    )

    llm_temperature: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="Sampling temperature (kept low for near-deterministic marks)",
    )

    llm_max_tokens: int = Field(
        default=100,
        ge=1,
        le=1024,
        description="Token budget for a single grading reply",
    )

    llm_stop_sequence: str = Field(
        default="\n",
        min_length=1,
        description="Generation stops at the first occurrence of this sequence",
    )

    grading_timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        le=600.0,
        description="Timeout for a single grading request",
    )

    # ==========================================================================
    # Evaluation Configuration
    # ==========================================================================
    grading_workers: int = Field(
        default=1,
        ge=1,
        le=16,
        description="Number of answers graded concurrently within one submission",
    )

    # ==========================================================================
    # Storage & Logging Configuration
    # ==========================================================================
    data_directory: Path = Field(
        default=Path("./data"),
        description="Root directory of the JSON exam and submission store",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level",
    )

    @field_validator("together_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure base URL doesn't have trailing slash."""
        return v.rstrip("/")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper()
        return v


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are only loaded once.
    """
    return Settings()
