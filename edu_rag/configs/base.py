"""
Shared settings plumbing.

Every config section reads the same .env file; env_config() builds the
SettingsConfigDict for a section with its own variable prefix.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict

ENV_FILE = ".env"


def env_config(prefix: str = "") -> SettingsConfigDict:
    """Settings config for a section whose variables start with `prefix`."""
    return SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        env_prefix=prefix,
        case_sensitive=False,
        extra="ignore",
    )


class BaseSettings(PydanticBaseSettings):
    """Top-level application fields, read without a prefix."""

    model_config = env_config()

    environment: str = Field(default="development", description="development, staging or production")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level name")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by the CORS middleware (JSON list in the environment)",
    )
