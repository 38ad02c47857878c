"""
FirehoseHook 单元测试

测试级别配置、策略注册、fire 调度顺序与错误传播。
"""

from __future__ import annotations

import boto3
import pytest
from botocore.stub import Stubber

from structlog_firehose.config import FirehoseSettings
from structlog_firehose.exceptions import ConfigurationError, SerializationError, SinkError
from structlog_firehose.hook import FirehoseHook
from structlog_firehose.sinks import FirehoseSink
from structlog_firehose.types import LogEntry, LogLevel

LEVEL_CASES = [
    None,
    [LogLevel.WARNING],
    [LogLevel.ERROR],
    [LogLevel.WARNING, LogLevel.DEBUG],
    [LogLevel.WARNING, LogLevel.DEBUG, LogLevel.ERROR],
]


class TestLevels:
    """levels / set_levels 测试"""

    @pytest.mark.parametrize("levels", LEVEL_CASES)
    def test_round_trip(self, sink, levels) -> None:
        """新建 hook 的 levels() 为 None，之后返回最近一次设置的值"""
        hook = FirehoseHook("s", sink)
        assert hook.levels() is None

        hook.set_levels(levels)
        assert hook.levels() == levels

        hook.set_levels(None)
        assert hook.levels() is None

    def test_empty_list_kept_as_is(self, hook: FirehoseHook) -> None:
        hook.set_levels([])
        assert hook.levels() == []
        assert hook.wants(LogLevel.DEBUG)

    def test_returned_list_is_a_copy(self, hook: FirehoseHook) -> None:
        hook.set_levels([LogLevel.ERROR])
        hook.levels().append(LogLevel.DEBUG)  # type: ignore[union-attr]
        assert hook.levels() == [LogLevel.ERROR]

    def test_wants(self, hook: FirehoseHook) -> None:
        assert hook.wants(LogLevel.DEBUG)
        hook.set_levels([LogLevel.ERROR, LogLevel.CRITICAL])
        assert hook.wants(LogLevel.ERROR)
        assert not hook.wants(LogLevel.WARNING)


class TestPolicyRegistration:
    """add_ignore / add_filter 测试"""

    def test_add_ignore(self, hook: FirehoseHook) -> None:
        names = ["foo", "bar", "baz"]
        for i, name in enumerate(names):
            assert len(hook.policy.ignored) == i
            hook.add_ignore(name)
            hook.add_ignore(name)
            assert len(hook.policy.ignored) == i + 1

    def test_add_filter_with_none(self, hook: FirehoseHook, sink) -> None:
        """注册 None 过滤函数后，fire 仍正常工作"""
        for i, name in enumerate(["foo", "bar", "baz"]):
            assert len(hook.policy.filters) == i
            hook.add_filter(name, None)
            assert len(hook.policy.filters) == i + 1

        hook.fire(LogEntry(message="m", fields={"foo": 1}))
        assert sink.records == [("default_stream", b'{"foo":1,"message":"m"}')]


class TestFire:
    """fire 调度测试"""

    def test_default_stream(self, hook: FirehoseHook, sink) -> None:
        hook.fire(LogEntry(message="entry_message", fields={"name": "apple", "price": 105, "color": "red"}))
        assert sink.records == [
            ("default_stream", b'{"color":"red","message":"entry_message","name":"apple","price":105}')
        ]

    def test_entry_stream_overrides_default(self, hook: FirehoseHook, sink) -> None:
        hook.fire(LogEntry(message="m", fields={"stream_name": "audit"}))
        assert sink.records == [("audit", b'{"message":"m","stream_name":"audit"}')]

    def test_stream_name_for(self, hook: FirehoseHook) -> None:
        assert hook.stream_name_for(LogEntry(message="m", fields={"stream_name": ""})) == ""
        assert hook.stream_name_for(LogEntry(message="m", fields={"stream_name": 99999})) == "default_stream"

    def test_ignore_stream_name_field(self, hook: FirehoseHook, sink) -> None:
        """忽略 stream_name 字段只影响记录内容，不影响路由"""
        hook.add_ignore("stream_name")
        hook.fire(LogEntry(message="m", fields={"stream_name": "audit"}))
        assert sink.records == [("audit", b'{"message":"m"}')]

    def test_policy_and_newline(self, hook: FirehoseHook, sink) -> None:
        hook.add_ignore("password")
        hook.add_filter("user", lambda user: user.upper())
        hook.add_newline(True)

        hook.fire(LogEntry(message="login", fields={"user": "alice", "password": "hunter2"}))
        assert sink.records == [("default_stream", b'{"message":"login","user":"ALICE"}\n')]

    def test_fire_does_not_filter_levels(self, hook: FirehoseHook, sink) -> None:
        """级别过滤由日志框架负责，fire 本身不再过滤"""
        hook.set_levels([LogLevel.ERROR])
        hook.fire(LogEntry(message="m", level=LogLevel.DEBUG))
        assert len(sink.records) == 1

    def test_sink_error_propagates_unchanged(self, make_sink) -> None:
        """sink 异常原样抛出，不重试"""
        error = SinkError("throttled", stream_name="default_stream")
        hook = FirehoseHook("default_stream", make_sink(error=error))

        with pytest.raises(SinkError) as exc_info:
            hook.fire(LogEntry(message="m"))
        assert exc_info.value is error

    def test_arbitrary_sink_exception_propagates(self, make_sink) -> None:
        hook = FirehoseHook("s", make_sink(error=ConnectionError("reset")))
        with pytest.raises(ConnectionError, match="reset"):
            hook.fire(LogEntry(message="m"))

    def test_serialization_error_skips_sink(self, hook: FirehoseHook, sink) -> None:
        with pytest.raises(SerializationError):
            hook.fire(LogEntry(message="m", fields={"opaque": object()}))
        assert sink.records == []


def test_close_closes_sink(hook: FirehoseHook, sink) -> None:
    hook.close()
    assert sink.closed


class TestConstruction:
    """构造期校验：失败立即抛出，绝不返回半可用的 hook"""

    def test_new_without_region(self, isolated_aws_env) -> None:
        config = FirehoseSettings(access_key="AKIDEXAMPLE", secret_key="secret")
        with pytest.raises(ConfigurationError):
            FirehoseHook.new("test_stream", config)

    def test_new_without_credentials(self, isolated_aws_env) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            FirehoseHook.new("test_stream", FirehoseSettings(region="ap-northeast-1"))
        assert exc_info.value.code == "missing_credentials"

    def test_with_session_none(self) -> None:
        with pytest.raises(ConfigurationError):
            FirehoseHook.with_session("test_stream", None)

    def test_with_session_fires_put_record(self, isolated_aws_env) -> None:
        session = boto3.session.Session(
            aws_access_key_id="AKIDEXAMPLE",
            aws_secret_access_key="secret",
            region_name="ap-northeast-1",
        )
        hook = FirehoseHook.with_session("test_stream", session)
        assert isinstance(hook.sink, FirehoseSink)
        assert hook.default_stream_name == "test_stream"

        with Stubber(hook.sink.client) as stubber:
            stubber.add_response(
                "put_record",
                {"RecordId": "record-1"},
                {"DeliveryStreamName": "test_stream", "Record": {"Data": b'{"message":"my_message","tag":"fieldTag"}'}},
            )
            hook.fire(LogEntry(message="my_message", level=LogLevel.ERROR, fields={"tag": "fieldTag"}))
            stubber.assert_no_pending_responses()
