"""
Configuration management for InvestTrack.
Uses pydantic-settings for type-safe, centralized configuration.
"""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Uses pydantic-settings for validation and type safety.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )

    # Database
    database_url: str = "sqlite:///invest_track.db"
    db_echo: bool = False

    # Identity resolved by the hosting environment (reverse proxy, SSO, ...)
    user_id: Optional[str] = None

    # Display
    currency_symbol: str = "₹"

    # Transaction form defaults
    default_broker_fee_percent: float = 5.0
    default_tax_percent: float = 0.0

    # Tax / term classification
    long_term_threshold_days: int = 365
    fiscal_year_start_month: int = 4  # April

    # Logging
    log_level: str = "INFO"

    @property
    def is_sqlite(self) -> bool:
        """Check if the configured database is SQLite."""
        return self.database_url.startswith("sqlite")


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from environment (useful for testing)."""
    global _settings
    _settings = Settings()
    return _settings
