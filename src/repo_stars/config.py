"""Configuration settings for Repo Stars."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnrichmentConfig(BaseModel):
    """Configuration for staggered popularity enrichment.

    The stagger interval is tuned against GitHub's unauthenticated
    rate limit (60 requests/hour) and is not derived from it.
    """

    stagger_interval_ms: int = Field(
        default=6000,
        ge=0,
        description="Milliseconds between successive request launches",
    )
    fetch_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Per-request timeout (None = wait for the transport)",
    )

    @property
    def stagger_interval(self) -> float:
        """Get the stagger interval in seconds."""
        return self.stagger_interval_ms / 1000


class LoggingConfig(BaseModel):
    """Configuration for logging behavior.

    Controls file logging, rotation, and output format.
    """

    log_file: str | None = Field(
        default=None,
        description="Optional path for file logging (enables rotation)",
    )
    rotation: str = Field(
        default="10 MB",
        description="When to rotate log file (e.g., '10 MB', '1 day')",
    )
    retention: str = Field(
        default="7 days",
        description="How long to keep rotated logs",
    )
    serialize: bool = Field(
        default=False,
        description="If True, output JSON format to file",
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # GitHub API
    # --------------------------------------------------------------------------
    github_token: str = Field(
        default="",
        description="Optional GitHub token (requests are anonymous when empty)",
    )

    # --------------------------------------------------------------------------
    # Application
    # --------------------------------------------------------------------------
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # --------------------------------------------------------------------------
    # Enrichment
    # --------------------------------------------------------------------------
    enrichment: EnrichmentConfig = Field(
        default_factory=EnrichmentConfig,
        description="Staggered fetch configuration",
    )

    # --------------------------------------------------------------------------
    # Logging Configuration
    # --------------------------------------------------------------------------
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration (file output, rotation)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
