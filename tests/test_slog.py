"""Tests for the structured logger"""

import contextvars
import io
import json
import os
import threading
import time

import pytest
from opentelemetry.trace import SpanContext, TraceFlags

from tau import slog
from tau.slog import (
    Entry,
    Logger,
    LoggerBuilder,
    LoggerConfig,
    Operation,
    Severity,
    default_logger,
)
from tau.slog.entry import LABELS_KEY, OPERATION_KEY, SOURCE_LOCATION_KEY
from tau.slog.formatters import JSONFormatter

SEVERITY_METHODS = [
    ("debug", "DEBUG"),
    ("info", "INFO"),
    ("notice", "NOTICE"),
    ("warn", "WARNING"),
    ("warning", "WARNING"),
    ("error", "ERROR"),
    ("critical", "CRITICAL"),
    ("alert", "ALERT"),
    ("emergency", "EMERGENCY"),
]


def lines(buf):
    return [json.loads(line) for line in buf.getvalue().splitlines()]


class ChunkedWriter(io.StringIO):
    """Sink that writes in small pieces and yields between them."""

    def write(self, s):
        for i in range(0, len(s), 8):
            super().write(s[i:i + 8])
            time.sleep(0)
        return len(s)


@pytest.fixture
def buf():
    return io.StringIO()


@pytest.fixture
def logger(buf):
    return Logger(buf)


@pytest.fixture
def std(buf):
    """Point the default logger at a buffer for the duration of a test."""
    std = default_logger()
    project = std.project
    include = std.include_sources
    std.set_output(buf)
    yield std
    std.set_output(io.StringIO())
    std.set_project(project)
    std.set_include_sources(include)


class TestSeverity:
    """Test severity enumeration."""

    def test_names(self):
        assert str(Severity.INFO) == "INFO"
        assert [s.value for s in Severity] == [
            "DEBUG", "INFO", "NOTICE", "WARNING",
            "ERROR", "CRITICAL", "ALERT", "EMERGENCY",
        ]

    def test_from_string(self):
        assert Severity.from_string("notice") == Severity.NOTICE
        assert Severity.from_string("WARN") == Severity.WARNING
        with pytest.raises(ValueError):
            Severity.from_string("verbose")

    def test_captures_stack(self):
        assert not Severity.WARNING.captures_stack
        assert Severity.ERROR.captures_stack
        assert Severity.EMERGENCY.captures_stack


class TestSeverities:
    """Every receiver writes one line with the requested severity."""

    @pytest.mark.parametrize("method,level", SEVERITY_METHODS)
    def test_logger(self, logger, buf, method, level):
        getattr(logger, method)("hello")
        records = lines(buf)
        assert len(records) == 1
        assert records[0]["severity"] == level
        assert records[0]["message"] == "hello"

    @pytest.mark.parametrize("method,level", SEVERITY_METHODS)
    def test_entry(self, logger, buf, method, level):
        getattr(logger.entry(), method)("hello")
        records = lines(buf)
        assert len(records) == 1
        assert records[0]["severity"] == level

    @pytest.mark.parametrize("method,level", SEVERITY_METHODS)
    def test_package(self, std, buf, method, level):
        getattr(slog, method)("hello")
        records = lines(buf)
        assert len(records) == 1
        assert records[0]["severity"] == level

    @pytest.mark.parametrize("method,level", SEVERITY_METHODS)
    def test_formatted(self, std, logger, buf, method, level):
        getattr(logger, method + "f")("works: %s", True)
        getattr(logger.entry(), method + "f")("works: %s", True)
        getattr(slog, method + "f")("works: %s", True)
        records = lines(buf)
        assert len(records) == 3
        for record in records:
            assert record["message"] == "works: True"
            assert record["severity"] == level

    def test_print_style_join(self, logger, buf):
        logger.info("count", 3, None)
        assert lines(buf)[0]["message"] == "count 3 None"

    def test_bad_format_does_not_raise(self, logger, buf):
        logger.infof("%d items", "many")
        assert lines(buf)[0]["message"].startswith("%d items")

    def test_format_without_args(self, logger, buf):
        logger.infof("100%")
        assert lines(buf)[0]["message"] == "100%"


class TestEntryBranching:
    """With* calls never alter the parent entry."""

    def test_detail_scenario(self, logger, buf):
        logger.with_detail("key", "value").info("hello")
        logger.info("hello2")
        first, second = lines(buf)
        assert first["message"] == "hello"
        assert first["severity"] == "INFO"
        assert first["details"] == {"key": "value"}
        assert "details" not in second

    def test_labels_stringified(self, logger, buf):
        e = logger.with_labels({"hello": "world"})
        e = e.with_labels({"another": 1})
        e.info("testing")
        assert lines(buf)[0][LABELS_KEY] == {"hello": "world", "another": "1"}

    def test_child_labels_do_not_alias(self, logger, buf):
        parent = logger.with_labels({"a": 1})
        child = parent.with_labels({"b": 2})
        child.labels["c"] = "x"
        parent.info("parent")
        assert lines(buf)[0][LABELS_KEY] == {"a": "1"}

    def test_child_details_do_not_alias(self, logger, buf):
        parent = logger.with_details({"hello": "world"})
        child = parent.with_detail("another", 1)
        child.details["extra"] = True
        parent.info("parent")
        child.info("child")
        parent_record, child_record = lines(buf)
        assert parent_record["details"] == {"hello": "world"}
        assert child_record["details"] == {"hello": "world", "another": 1, "extra": True}

    def test_details_keep_structure(self, logger, buf):
        logger.with_details({"nested": {"list": [1, 2]}, "n": 1.5}).info("x")
        assert lines(buf)[0]["details"] == {"nested": {"list": [1, 2]}, "n": 1.5}

    def test_error(self, logger, buf):
        e = logger.with_error(ValueError("error msg A"))
        assert e.err == "error msg A"
        child = e.with_error(ValueError("error msg B"))
        assert child.err == "error msg B"
        assert e.err == "error msg A"
        child.info("testing")
        assert lines(buf)[0]["error"] == "error msg B"

    def test_error_cleared(self, logger, buf):
        e = logger.with_error(ValueError("boom")).with_error(None)
        e.info("testing")
        assert "error" not in lines(buf)[0]

    def test_bare_entry_uses_default_logger(self, std, buf):
        Entry().with_detail("k", "v").info("bare")
        assert lines(buf)[0]["details"] == {"k": "v"}

    def test_emission_does_not_mutate_entry(self, logger):
        e = logger.entry()
        e.info("hello")
        assert e.message == ""
        assert e.severity is None
        assert e.source_location is None


class TestOperations:
    """Operation lifecycle updates the entry in place."""

    def test_with_operation(self, logger, buf):
        e = logger.with_operation("123", "testProducer")
        e.info("testing")
        op = lines(buf)[0][OPERATION_KEY]
        assert op == {"id": "123", "producer": "testProducer"}

    def test_with_operation_returns_receiver(self, logger):
        e = logger.entry()
        assert e.with_operation("1", "p") is e
        assert e.operation == Operation(id="1", producer="p")

    def test_start_operation(self, logger, buf):
        e = logger.start_operation("123", "testProducer")
        e.info("after start")
        start, after = lines(buf)
        assert start["severity"] == "NOTICE"
        assert start["message"] == "testProducer starting operation 123"
        assert start[OPERATION_KEY] == {"id": "123", "producer": "testProducer", "first": True}
        assert after[OPERATION_KEY] == {"id": "123", "producer": "testProducer"}

    def test_end_operation(self, logger, buf):
        e = logger.start_operation("123", "testProducer")
        e.end_operation()
        e.info("after end")
        _, end, after = lines(buf)
        assert end["severity"] == "NOTICE"
        assert end["message"] == "testProducer ending operation 123"
        assert end[OPERATION_KEY]["last"] is True
        assert OPERATION_KEY not in after
        assert e.operation is None

    def test_end_without_operation_is_silent(self, logger, buf):
        logger.entry().end_operation()
        assert buf.getvalue() == ""

    def test_end_twice_logs_once(self, logger, buf):
        e = logger.with_operation("1", "p")
        e.end_operation()
        e.end_operation()
        assert len(lines(buf)) == 1

    def test_child_operation_is_independent(self, logger, buf):
        parent = logger.with_operation("1", "p")
        child = parent.with_labels({"k": "v"})
        child.end_operation()
        parent.info("still running")
        record = lines(buf)[-1]
        assert record[OPERATION_KEY] == {"id": "1", "producer": "p"}

    def test_package_start_operation(self, std, buf):
        e = slog.start_operation("123", "testProducer")
        e.end_operation()
        assert len(lines(buf)) == 2


class TestStackTraces:
    """Stack capture for the exception field."""

    def test_error_includes_stack(self, logger, buf):
        logger.error("boom")
        exception = lines(buf)[0]["exception"]
        assert exception.startswith("boom:\n\nTraceback (most recent call last):")
        assert "test_error_includes_stack" in exception

    def test_error_description_uses_err(self, logger, buf):
        logger.with_error(RuntimeError("bad thing")).error("boom")
        record = lines(buf)[0]
        assert record["error"] == "bad thing"
        assert record["exception"].startswith("bad thing:")

    def test_lower_severities_have_no_stack(self, logger, buf):
        logger.warn("careful")
        assert "exception" not in lines(buf)[0]

    def test_with_stack(self, logger, buf):
        e = logger.entry()
        c = e.with_stack()
        assert e.frames == ()
        c.info("with stack")
        e.info("without stack")
        with_stack, without_stack = lines(buf)
        assert "test_with_stack" in with_stack["exception"]
        assert "exception" not in without_stack

    def test_stack_depth(self, buf):
        logger = LoggerBuilder().with_output(buf).with_stack_depth(1).build()
        logger.error("shallow")
        exception = lines(buf)[0]["exception"]
        assert exception.count('  File "') == 1
        assert "test_stack_depth" in exception


class TestSources:
    """Source locations of the call site."""

    def test_source_location(self, logger, buf):
        logger.info("where")
        source = lines(buf)[0][SOURCE_LOCATION_KEY]
        assert os.path.basename(source["file"]) == "test_slog.py"
        assert int(source["line"]) > 0
        assert source["function"].endswith("test_source_location")

    def test_entry_source_location(self, logger, buf):
        logger.with_detail("k", "v").info("where")
        logger.start_operation("1", "p")
        for record in lines(buf):
            assert record[SOURCE_LOCATION_KEY]["function"].endswith("test_entry_source_location")

    def test_package_source_location(self, std, buf):
        std.set_include_sources(True)
        slog.info("where")
        slog.error("where")
        for record in lines(buf):
            assert record[SOURCE_LOCATION_KEY]["function"].endswith("test_package_source_location")

    def test_disable_sources(self, logger, buf):
        logger.set_include_sources(False)
        logger.info("testing")
        logger.set_include_sources(True)
        logger.info("testing")
        without, with_sources = lines(buf)
        assert SOURCE_LOCATION_KEY not in without
        assert SOURCE_LOCATION_KEY in with_sources


class TestSpans:
    """Trace correlation fields."""

    TRACE_ID = 0x4BF92F3577B34DA6A3CE929D0E0E4736
    SPAN_ID = 0x00F067AA0BA902B7

    def span_context(self, sampled=True):
        flags = TraceFlags(TraceFlags.SAMPLED if sampled else TraceFlags.DEFAULT)
        return SpanContext(self.TRACE_ID, self.SPAN_ID, is_remote=False, trace_flags=flags)

    def test_no_trace_by_default(self, logger, buf):
        logger.info("testing")
        record = lines(buf)[0]
        assert "logging.googleapis.com/trace" not in record
        assert "logging.googleapis.com/spanId" not in record

    def test_with_span(self, buf):
        logger = LoggerBuilder().with_output(buf).with_project("test").build()
        logger.with_span(self.span_context()).info("testing")
        record = lines(buf)[0]
        assert record["logging.googleapis.com/trace"] == (
            "projects/test/traces/4bf92f3577b34da6a3ce929d0e0e4736"
        )
        assert record["logging.googleapis.com/spanId"] == "00f067aa0ba902b7"
        assert record["logging.googleapis.com/trace_sampled"] is True

    def test_not_sampled(self, logger, buf):
        logger.set_project("test")
        logger.with_span(self.span_context(sampled=False)).info("testing")
        assert "logging.googleapis.com/trace_sampled" not in lines(buf)[0]

    def test_without_project(self, logger, buf):
        e = logger.with_span(self.span_context())
        assert e.trace == ""
        assert e.span_id == ""
        e.info("testing")
        assert "logging.googleapis.com/trace" not in lines(buf)[0]

    def test_package_with_span(self, std, buf):
        slog.set_project("test")
        slog.with_span(self.span_context()).info("testing")
        assert "logging.googleapis.com/spanId" in lines(buf)[0]


class TestContext:
    """Entries carried by contextvars."""

    def test_missing_entry(self, std):
        got = slog.from_context(contextvars.Context())
        assert got == std.entry()
        assert got.logger is std

    def test_round_trip(self, logger):
        want = logger.with_details({"hello": "world"})
        ctx = slog.with_context(contextvars.Context(), want)
        assert slog.from_context(ctx) is want

    def test_parent_context_unchanged(self, logger):
        parent = contextvars.Context()
        slog.with_context(parent, logger.entry())
        assert len(parent) == 0

    def test_current_context(self, logger):
        want = logger.entry()
        token = slog.set_entry(want)
        try:
            assert slog.from_context() is want
        finally:
            slog.reset_entry(token)


class TestErrorHandling:
    """Logging never raises from emission."""

    def test_unserializable_detail(self, logger, buf, capsys):
        logger.with_detail("bad", object()).info("dropped")
        assert buf.getvalue() == ""
        assert "could not marshal log" in capsys.readouterr().err
        assert logger.get_metrics() == {"written": 0, "dropped": 1}

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_detail(self, logger, buf, capsys, value):
        """NaN and infinities have no JSON form, so the record is dropped"""
        logger.with_detail("ratio", value).info("x")
        assert buf.getvalue() == ""
        assert "could not marshal log" in capsys.readouterr().err
        assert logger.get_metrics() == {"written": 0, "dropped": 1}

    def test_known_types_serialized(self, logger, buf):
        import datetime
        import uuid

        when = datetime.datetime(2021, 1, 2, 3, 4, 5)
        ident = uuid.UUID(int=1)
        logger.with_details({"when": when, "id": ident}).info("ok")
        details = lines(buf)[0]["details"]
        assert details == {"when": "2021-01-02T03:04:05", "id": str(ident)}

    def test_closed_output(self, logger, buf, capsys):
        buf.close()
        logger.info("nowhere")
        assert "could not write log" in capsys.readouterr().err
        assert logger.get_metrics()["dropped"] == 1


class TestLoggerConfig:
    """Test logger configuration."""

    def test_default_config(self):
        config = LoggerConfig.default()
        assert config.include_sources is True
        assert config.project == ""
        assert config.stack_depth == 16

    def test_invalid_stack_depth(self):
        with pytest.raises(ValueError):
            LoggerConfig(stack_depth=0)
        with pytest.raises(ValueError):
            LoggerBuilder().with_stack_depth(-1)

    def test_from_env(self):
        config = LoggerConfig.from_env({
            "GOOGLE_CLOUD_PROJECT": "my-project",
            "SLOG_INCLUDE_SOURCES": "false",
        })
        assert config.project == "my-project"
        assert config.include_sources is False

    def test_logger_copies_config(self):
        config = LoggerConfig()
        logger = Logger(io.StringIO(), config)
        logger.set_project("changed")
        assert config.project == ""
        assert logger.project == "changed"

    def test_builder(self, buf):
        logger = (LoggerBuilder()
            .with_output(buf)
            .with_project("p")
            .with_sources(False)
            .with_formatter(JSONFormatter(sort_keys=True))
            .build())
        logger.info("built")
        assert buf.getvalue() == '{"message":"built","severity":"INFO"}\n'
        assert logger.project == "p"

    def test_ascii(self, buf):
        logger = LoggerBuilder().with_output(buf).with_sources(False).with_ascii().build()
        logger.info("café")
        assert "\\u00e9" in buf.getvalue()


class TestConcurrency:
    """Concurrent writers never interleave lines."""

    def test_concurrent_writes(self):
        buf = ChunkedWriter()
        logger = Logger(buf)
        threads = 10
        per_thread = 50
        start = threading.Barrier(threads)

        def work(n):
            e = logger.with_labels({"thread": n})
            start.wait()
            for i in range(per_thread):
                e.with_detail("i", i).info("hello")

        workers = [threading.Thread(target=work, args=(n,)) for n in range(threads)]
        for w in workers:
            w.start()
        for w in workers:
            w.join()

        records = lines(buf)
        assert len(records) == threads * per_thread
        assert all(r["message"] == "hello" for r in records)
        assert logger.get_metrics()["written"] == threads * per_thread

    def test_setters_during_writes(self, logger, buf):
        stop = threading.Event()

        def toggle():
            while not stop.is_set():
                logger.set_include_sources(False)
                logger.set_include_sources(True)

        t = threading.Thread(target=toggle)
        t.start()
        try:
            for _ in range(200):
                logger.info("hello")
        finally:
            stop.set()
            t.join()
        assert len(lines(buf)) == 200
