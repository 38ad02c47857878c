"""
Record sink abstractions and concrete implementations.

A sink receives one serialized record per log event together with the
resolved stream name. Retry policy, throttling and credential refresh belong
to the sink's client, not to the hook.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import ConfigurationError, SinkError
from .logging import get_logger

if TYPE_CHECKING:
    from .config import FirehoseSettings

logger = get_logger("structlog_firehose.sinks")


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for record sinks."""

    @abstractmethod
    def put(self, stream_name: str, payload: bytes) -> None:
        """Deliver one record to the named stream."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the sink and release resources."""
        ...


class StdioSink(BaseSink):
    """Writes records to a text stream, one per line, for local development.

    Args:
        stream: Output stream (default: stdout)
        show_stream_name: Prefix each line with the resolved stream name
    """

    def __init__(self, stream: Any = None, *, show_stream_name: bool = True):
        self._stream = stream or sys.stdout
        self._show_stream_name = show_stream_name

    def put(self, stream_name: str, payload: bytes) -> None:
        line = payload.decode("utf-8").rstrip("\n")
        if self._show_stream_name:
            line = f"[{stream_name}] {line}"
        self._stream.write(line + "\n")
        self._stream.flush()

    def close(self) -> None:
        pass


class FirehoseSink(BaseSink):
    """Amazon Kinesis Data Firehose sink (``PutRecord`` per event).

    Build it through `from_settings` or `from_session`; both validate region
    and credentials up front so a misconfigured sink never reaches `put`.
    """

    def __init__(self, client: Any):
        self._client = client

    @property
    def client(self) -> Any:
        return self._client

    @classmethod
    def from_settings(cls, config: "FirehoseSettings") -> "FirehoseSink":
        """Create a sink from explicit settings, falling back to the AWS chain.

        Raises:
            ConfigurationError: If region or credentials are missing or invalid
        """
        if bool(config.access_key) != bool(config.secret_key):
            raise ConfigurationError(
                "Both FIREHOSE_ACCESS_KEY and FIREHOSE_SECRET_KEY must be set, or neither",
                code="partial_credentials",
            )

        try:
            session = boto3.session.Session(
                aws_access_key_id=config.access_key or None,
                aws_secret_access_key=config.secret_key.get_secret_value() if config.secret_key else None,
                aws_session_token=config.session_token.get_secret_value() if config.session_token else None,
                region_name=config.region or None,
            )
        except BotoCoreError as exc:
            raise ConfigurationError(f"Failed to create AWS session: {exc}", code="invalid_session") from exc

        return cls.from_session(session, endpoint_url=config.endpoint_url)

    @classmethod
    def from_session(cls, session: Optional[boto3.session.Session], *, endpoint_url: Optional[str] = None) -> "FirehoseSink":
        """Create a sink from a pre-configured boto3 session.

        Raises:
            ConfigurationError: If the session is missing, has no region or no credentials
        """
        if session is None:
            raise ConfigurationError("AWS session is required", code="missing_session")

        region = session.region_name
        if not region:
            raise ConfigurationError("AWS region not configured (FIREHOSE_REGION)", code="missing_region")

        try:
            credentials = session.get_credentials()
        except BotoCoreError as exc:
            raise ConfigurationError(f"Failed to resolve AWS credentials: {exc}", code="invalid_credentials") from exc
        if credentials is None:
            raise ConfigurationError("No AWS credentials found", code="missing_credentials")

        try:
            client = session.client("firehose", endpoint_url=endpoint_url or None)
        except (BotoCoreError, ValueError) as exc:
            raise ConfigurationError(f"Failed to create Firehose client: {exc}", code="invalid_client") from exc

        logger.info("firehose_sink_initialized", region=region, endpoint_url=endpoint_url)
        return cls(client)

    def put(self, stream_name: str, payload: bytes) -> None:
        """Send one record.

        Raises:
            SinkError: If the PutRecord call fails
        """
        try:
            self._client.put_record(DeliveryStreamName=stream_name, Record={"Data": payload})
        except ClientError as exc:
            error_code = exc.response.get("Error", {}).get("Code", "Unknown")
            raise SinkError(
                f"Failed to put record to Firehose stream {stream_name!r}: {exc}",
                stream_name=stream_name,
                details={"aws_error_code": error_code},
            ) from exc
        except BotoCoreError as exc:
            raise SinkError(
                f"Failed to put record to Firehose stream {stream_name!r}: {exc}",
                stream_name=stream_name,
            ) from exc

    def close(self) -> None:
        close = getattr(self._client, "close", None)
        if callable(close):
            close()
