"""Application settings and configuration."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from FUND_MONITOR_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FUND_MONITOR_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Fund Monitor"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    # Quote provider
    provider: str = "itick"  # "itick" or "stub"
    provider_base_url: str = "https://api.itick.org"
    provider_token: Optional[str] = None
    provider_timeout_seconds: float = 10.0

    # Quote cache and refresh cycle
    quote_cache_ttl_seconds: float = 30.0
    coalesce_inflight_quotes: bool = False
    refresh_interval_seconds: float = 30.0  # 0 disables the auto-refresh loop
    allow_overlapping_refresh: bool = False

    # Static holdings, supplied by the embedding application
    portfolio_config_path: Optional[Path] = None

    # HTTP surface
    api_host: str = "127.0.0.1"
    api_port: int = 8001


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
