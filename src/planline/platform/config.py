"""
Planline Configuration Management

Uses Pydantic Settings for type-safe configuration from environment variables.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # =========================================================================
    # APPLICATION
    # =========================================================================
    APP_NAME: str = "Planline"
    APP_ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "info"
    VERSION: str = "0.1.0"

    # =========================================================================
    # RECURRING MILESTONES
    # =========================================================================
    # Continuous projects have no end date; expansion stops at whichever
    # of these two bounds is reached first.
    RECURRENCE_HORIZON_DAYS: int = 365
    RECURRENCE_MAX_OCCURRENCES: int = 100
    # Upper bound for projects with a fixed end date
    RECURRENCE_SAFETY_LIMIT: int = 365

    # =========================================================================
    # ESTIMATES
    # =========================================================================
    ESTIMATE_CACHE_MAX_ENTRIES: int = 256
    HOURS_TOLERANCE: float = 1e-6

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Singleton instance for easy import
settings = get_settings()
