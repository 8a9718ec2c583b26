"""Settings, logging and static portfolio configuration."""

from fund_monitor.config.settings import Settings, get_settings, set_settings, reset_settings
from fund_monitor.config.logging_config import setup_logging
from fund_monitor.config.portfolio_config import load_portfolio_config, parse_portfolio_config

__all__ = [
    "Settings",
    "get_settings",
    "set_settings",
    "reset_settings",
    "setup_logging",
    "load_portfolio_config",
    "parse_portfolio_config",
]
