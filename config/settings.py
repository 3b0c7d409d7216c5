"""Pydantic settings for configuration management."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import yaml

DEFAULT_ADMIN_KEY = "tempt-admin-2026"


class StorageConfig(BaseSettings):
    """Collection file storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding one JSON file per collection",
    )
    fail_fast: bool = Field(
        default=False,
        description="Raise on unreadable collection files instead of treating them as empty",
    )


class AdminConfig(BaseSettings):
    """Admin shared-secret configuration."""

    model_config = SettingsConfigDict(env_prefix="ADMIN_")

    key: str = Field(default=DEFAULT_ADMIN_KEY, description="Shared admin secret")
    header_name: str = Field(default="X-Admin-Key", description="Header carrying the admin key")
    query_param: str = Field(default="key", description="Query parameter carrying the admin key")

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Warn if using the shipped admin key."""
        if v == DEFAULT_ADMIN_KEY:
            import logging
            logging.getLogger(__name__).warning(
                "ADMIN_KEY is set to the default value. "
                "Set a strong secret in .env for production use."
            )
        return v


class WaitlistConfig(BaseSettings):
    """Waitlist and referral configuration."""

    model_config = SettingsConfigDict(env_prefix="WAITLIST_")

    top_referrers: int = Field(default=10, ge=1, description="Entries in the public leaderboard")
    code_bytes: int = Field(default=4, ge=2, description="Random bytes per referral code")
    code_attempts: int = Field(
        default=16,
        ge=1,
        description="Regeneration attempts before giving up on a unique referral code",
    )
    ref_code_max_length: int = Field(default=20, description="Maximum accepted referring-code length")


class AnalyticsConfig(BaseSettings):
    """Pageview analytics configuration."""

    model_config = SettingsConfigDict(env_prefix="ANALYTICS_")

    max_events: int = Field(default=10_000, ge=1, description="Retention ceiling for stored events")
    retain_events: int = Field(default=9_000, ge=0, description="Events kept when the ceiling is hit")
    page_max_length: int = Field(default=100, description="Maximum stored page path length")
    referrer_max_length: int = Field(default=200, description="Maximum inspected referrer length")
    default_window_days: int = Field(default=7, ge=1, description="Default aggregation window")
    top_pages: int = Field(default=20, ge=1, description="Pages listed in the aggregate")

    @model_validator(mode="after")
    def validate_retention(self) -> "AnalyticsConfig":
        """Pruning must actually shrink the collection."""
        if self.retain_events >= self.max_events:
            raise ValueError("ANALYTICS_RETAIN_EVENTS must be below ANALYTICS_MAX_EVENTS")
        return self


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Log level")
    format: Literal["json", "text"] = Field(
        default="json",
        description="Log format",
    )
    file: Path | None = Field(
        default=Path("logs/tempt_api.log"),
        description="Log file path (None for stdout only)",
    )
    rotate_size_mb: int = Field(
        default=10,
        description="Log file rotation size in MB",
    )
    retain_count: int = Field(
        default=5,
        description="Number of rotated log files to retain",
    )


class ServerConfig(BaseSettings):
    """HTTP server configuration."""

    model_config = SettingsConfigDict(env_prefix="SERVER_")

    port: int = Field(default=3031, description="Server port")
    host: str = Field(default="127.0.0.1", description="Server host")
    cors_origins: list[str] = Field(
        default=["*"],
        description="Origins allowed to call the API from a browser",
    )


class Settings(BaseSettings):
    """Main settings class combining all configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: Literal["development", "production"] = Field(
        default="development",
        description="Environment type",
    )

    storage: StorageConfig = Field(default_factory=StorageConfig)
    admin: AdminConfig = Field(default_factory=AdminConfig)
    waitlist: WaitlistConfig = Field(default_factory=WaitlistConfig)
    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @model_validator(mode="after")
    def validate_production_safety(self) -> "Settings":
        """Enforce safety invariants for production environments."""
        if self.environment == "production":
            if self.admin.key == DEFAULT_ADMIN_KEY:
                raise ValueError(
                    "ADMIN_KEY must be changed from the default in production"
                )
        return self

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Settings instance
        """
        path = Path(path)
        if not path.exists():
            return cls()

        with open(path) as f:
            config_dict = yaml.safe_load(f) or {}

        return cls(**config_dict)

    def to_yaml(self, path: str | Path) -> None:
        """Save settings to YAML file.

        Args:
            path: Path to save configuration
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        # Convert to dict, excluding secrets
        config_dict = self.model_dump(mode="json", exclude={"admin": {"key"}})

        with open(path, "w") as f:
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings instance
    """
    # Try to load from config file first
    config_path = Path("config/tempt.yaml")
    if config_path.exists():
        return Settings.from_yaml(config_path)

    return Settings()
