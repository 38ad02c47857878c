"""
Logging Configuration.
"""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from structlog_firehose.types import LogLevel


class LogFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


class LoggingSettings(BaseSettings):
    """Local logging pipeline configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FH_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    level: LogLevel = Field(default=LogLevel.INFO, description="Log level")
    format: LogFormat = Field(default=LogFormat.CONSOLE, description="Local output format")
    capture_stdlib: bool = Field(default=False, description="Ship stdlib logging records through the hook")
