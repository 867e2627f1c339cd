"""Configuration management for LAMA Agent.

This module handles all configuration loading and validation using Pydantic BaseSettings.
Configuration is loaded from environment variables and .env files.
"""

from .config import (
    ApplicationConfig,
    CategoryConfig,
    LamaConfig,
    MonitoringConfig,
    PrometheusConfig,
    ServerConfig,
    SyncConfig,
    str_to_bool,
)
from .hosts import load_scrape_targets, resolve_category_hosts


def load_config() -> ApplicationConfig:
    """Load and validate application configuration."""
    return ApplicationConfig()


__all__ = [
    "ApplicationConfig",
    "ServerConfig",
    "LamaConfig",
    "PrometheusConfig",
    "SyncConfig",
    "CategoryConfig",
    "MonitoringConfig",
    "load_config",
    "load_scrape_targets",
    "resolve_category_hosts",
    "str_to_bool",
]
