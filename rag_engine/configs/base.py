"""
Shared settings base.

Every engine config class reads the same .env file and ignores keys that
belong to other prefixes.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Engine-wide settings read without a prefix."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        default="development",
        description="Deployment label stamped on startup logs",
    )
    log_level: str = Field(
        default="INFO",
        description="Root level applied by configure_logging()",
    )
