import typing as t

import pytest
import structlog

from structlog_firehose.hook import FirehoseHook
from structlog_firehose.sinks import BaseSink

_AWS_ENV_VARS = (
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_SESSION_TOKEN",
    "AWS_SECURITY_TOKEN",
    "AWS_PROFILE",
    "AWS_DEFAULT_PROFILE",
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
    "AWS_CONTAINER_CREDENTIALS_RELATIVE_URI",
    "AWS_CONTAINER_CREDENTIALS_FULL_URI",
    "AWS_WEB_IDENTITY_TOKEN_FILE",
    "AWS_ROLE_ARN",
)


class RecordingSink(BaseSink):
    """In-memory sink capturing every (stream_name, payload) pair."""

    def __init__(self, error: Exception | None = None):
        self.records: list[tuple[str, bytes]] = []
        self.error = error
        self.closed = False

    def put(self, stream_name: str, payload: bytes) -> None:
        if self.error is not None:
            raise self.error
        self.records.append((stream_name, payload))

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def hook(sink: RecordingSink) -> FirehoseHook:
    return FirehoseHook("default_stream", sink)


@pytest.fixture
def isolated_aws_env(monkeypatch, tmp_path) -> t.Iterator[None]:
    """
    Hide every ambient AWS credential source so credential resolution is
    deterministic (no env vars, no shared files, no instance metadata).
    """
    for name in _AWS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "credentials"))
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "config"))
    monkeypatch.setenv("AWS_EC2_METADATA_DISABLED", "true")
    yield


@pytest.fixture(autouse=True)
def reset_structlog() -> t.Iterator[None]:
    """Restore structlog defaults so configure_logging() in one test never leaks."""
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def reset_root_handlers() -> t.Iterator[None]:
    """Drop any FirehoseHandler a test attached to the stdlib root logger."""
    import logging

    from structlog_firehose.logging.interceptors import FirehoseHandler

    root = logging.getLogger()
    level = root.level
    yield
    root.handlers = [h for h in root.handlers if not isinstance(h, FirehoseHandler)]
    root.setLevel(level)


@pytest.fixture
def make_sink() -> t.Callable[..., RecordingSink]:
    return RecordingSink
