"""
Configuration management for Continental.

Uses Pydantic Settings to load configuration from environment variables
with sensible defaults for development. The database URL in particular
should be set via environment variables or .env file in production.

Usage:
    from continental.config import settings
    print(settings.coefficient_window_years)
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


TIE_BREAK_MODES = ("name", "insertion")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables can be set directly or via a .env file
    in the project root directory.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ==========================================================================
    # Database Configuration
    # ==========================================================================

    database_url: str = Field(
        default="sqlite:///continental.db",
        description="SQLAlchemy URL for the coefficient snapshot store",
    )
    db_pool_size: int = Field(
        default=5,
        description="Number of connections to keep in the pool (ignored for SQLite)",
    )
    db_max_overflow: int = Field(
        default=10,
        description="Max additional connections beyond pool_size (ignored for SQLite)",
    )

    # ==========================================================================
    # Coefficient Configuration
    # ==========================================================================

    coefficient_window_years: int = Field(
        default=4,
        description="Number of most recent distinct years summed into a coefficient",
    )
    premier_top_band: int = Field(
        default=5,
        description="Premier tier: nations ranked inside this band get 2 slots, others 1",
    )
    challenger_top_band: int = Field(
        default=9,
        description="Challenger tier: nations ranked inside this band get 2 slots, others 1",
    )
    tie_break: str = Field(
        default="name",
        description=(
            "Ordering of entities level on points: 'name' sorts alphabetically "
            "by normalized name, 'insertion' keeps first-seen order"
        ),
    )

    # ==========================================================================
    # Name Matching Configuration
    # ==========================================================================

    # Fuzzy suggestions are only logged, never used to attach ids
    # See names.py for the scoring logic
    name_suggestion_threshold: float = Field(
        default=0.85,
        description="Log a suggested canonical record above this similarity score",
    )

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Format string passed to logging.basicConfig by scripts",
    )

    # ==========================================================================
    # Validators
    # ==========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper_v

    @field_validator("tie_break")
    @classmethod
    def validate_tie_break(cls, v: str) -> str:
        """Ensure tie-break mode is one we know how to sort by."""
        lower_v = v.lower()
        if lower_v not in TIE_BREAK_MODES:
            raise ValueError(f"tie_break must be one of {TIE_BREAK_MODES}")
        return lower_v

    @field_validator("coefficient_window_years")
    @classmethod
    def validate_window(cls, v: int) -> int:
        if v < 1:
            raise ValueError("coefficient_window_years must be at least 1")
        return v

    @field_validator("premier_top_band", "challenger_top_band")
    @classmethod
    def validate_band(cls, v: int) -> int:
        if v < 0:
            raise ValueError("qualification bands cannot be negative")
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures we only load settings once,
    which is important because loading from .env can be slow.
    """
    return Settings()


# Convenience alias for importing
settings = get_settings()
