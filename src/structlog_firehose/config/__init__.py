"""
structlog-firehose Configuration Module.

One settings class per concern, each with its own environment variable prefix:

- FIREHOSE_*: delivery stream, AWS client, record policy
- FH_LOG_*: local logging pipeline

Multi-Environment Support:
    Set `FH_ENV` (development, testing, staging, production) to pick the .env
    files to load (later overrides earlier):
    1. .env
    2. .env.local
    3. .env.{environment}
    4. .env.{environment}.local

Usage:
    from structlog_firehose.config import settings

    settings.firehose.stream_name
    settings.logging.level
"""

from functools import cached_property
import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from .firehose import FirehoseSettings, SinkKind
from .logging import LogFormat, LoggingSettings


def _get_env_files() -> tuple[str, ...]:
    """Determine which .env files to load based on FH_ENV."""
    env = os.getenv("FH_ENV", "development")
    return (
        ".env",
        ".env.local",
        f".env.{env}",
        f".env.{env}.local",
    )


class Settings(BaseSettings):
    """Composite settings aggregating the configuration domains."""

    model_config = SettingsConfigDict(
        env_file=_get_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @cached_property
    def firehose(self) -> FirehoseSettings:
        return FirehoseSettings()

    @cached_property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


settings = Settings()

__all__ = [
    "FirehoseSettings",
    "LogFormat",
    "LoggingSettings",
    "Settings",
    "SinkKind",
    "settings",
]
