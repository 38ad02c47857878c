"""
Firehose Hook Configuration.
"""

from enum import Enum
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from structlog_firehose.types import LogLevel


class SinkKind(str, Enum):
    FIREHOSE = "firehose"
    STDIO = "stdio"


class FirehoseSettings(BaseSettings):
    """Delivery stream, AWS client and record policy configuration.

    Credentials left unset fall through to the standard AWS chain
    (AWS_ACCESS_KEY_ID, shared credentials file, instance profile, ...).
    """

    model_config = SettingsConfigDict(
        env_prefix="FIREHOSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    stream_name: str = Field(default="", description="Default delivery stream name")
    sink: SinkKind = Field(default=SinkKind.FIREHOSE, description="Record sink (firehose, stdio)")

    # AWS client
    region: Optional[str] = Field(default=None, description="AWS region of the delivery stream")
    access_key: Optional[str] = Field(default=None, description="AWS access key ID")
    secret_key: Optional[SecretStr] = Field(default=None, description="AWS secret access key")
    session_token: Optional[SecretStr] = Field(default=None, description="AWS session token")
    endpoint_url: Optional[str] = Field(default=None, description="Custom Firehose endpoint (e.g. localstack)")

    # Record policy
    levels: Optional[list[LogLevel]] = Field(default=None, description="Levels to ship; empty ships all")
    ignore_fields: list[str] = Field(default_factory=list, description="Field names dropped from every record")
    add_newline: bool = Field(default=False, description="Append a newline to every record")
