"""Configuration module for the TEMPT API.

Provides centralized configuration management using:
- Environment variables for secrets
- YAML files for deployment overrides
- Pydantic for validation
"""

from config.settings import (
    Settings,
    get_settings,
    StorageConfig,
    AdminConfig,
    WaitlistConfig,
    AnalyticsConfig,
    LoggingConfig,
    ServerConfig,
)

__all__ = [
    "Settings",
    "get_settings",
    "StorageConfig",
    "AdminConfig",
    "WaitlistConfig",
    "AnalyticsConfig",
    "LoggingConfig",
    "ServerConfig",
]
