"""
Main Logger class - thread-safe structured logger

Writes one JSON record per line to its output, serializing writes
under a single lock.
"""

from __future__ import annotations

import sys
import threading
from dataclasses import replace
from typing import Any, Mapping, Optional, TextIO

from opentelemetry.trace import SpanContext

from tau.slog.entry import Entry, _sprint, _sprintf
from tau.slog.formatters.base_formatter import BaseFormatter
from tau.slog.formatters.json_formatter import JSONFormatter
from tau.slog.logger_config import LoggerConfig
from tau.slog.severity import Severity
from tau.slog.sources import get_source
from tau.slog.stack import format_stack_trace


class Logger:
    """Logger used to write structured logs in a thread-safe manner to a given output."""

    def __init__(
        self,
        output: Optional[TextIO] = None,
        config: Optional[LoggerConfig] = None,
        formatter: Optional[BaseFormatter] = None,
    ):
        self._lock = threading.Lock()  # ensures atomic writes
        self._output = output if output is not None else sys.stdout
        self._config = replace(config) if config is not None else LoggerConfig.default()
        self._formatter = formatter or JSONFormatter(ensure_ascii=self._config.ensure_ascii)
        self._metrics = {"written": 0, "dropped": 0}
        self._base = Entry(logger=self)

    @property
    def config(self) -> LoggerConfig:
        return self._config

    @property
    def base(self) -> Entry:
        """Shared empty entry used by the severity methods."""
        return self._base

    @property
    def project(self) -> str:
        return self._config.project

    @property
    def include_sources(self) -> bool:
        return self._config.include_sources

    def set_output(self, output: TextIO) -> None:
        """Set output destination for the logger."""
        with self._lock:
            self._output = output

    def set_project(self, project: str) -> None:
        """
        Set project for the logger.

        Used for things such as traces that require project to be included.
        """
        with self._lock:
            self._config.project = project

    def set_include_sources(self, include: bool) -> None:
        """Include file, line and function of the call site in every record."""
        with self._lock:
            self._config.include_sources = include

    def set_formatter(self, formatter: BaseFormatter) -> None:
        with self._lock:
            self._formatter = formatter

    def entry(self) -> Entry:
        """Create a new Entry allowing for reusing details across multiple log calls."""
        return Entry(logger=self)

    new_entry = entry

    def log(self, entry: Entry, severity: Severity, message: str, depth: int = 1) -> None:
        """
        Write an entry with the given severity and message.

        Args:
            entry: Entry carrying the accumulated context
            severity: Severity of the record
            message: Fully formatted message
            depth: Frames between this method and the call site to report
        """
        # Do costly operations prior to grabbing the lock
        if severity.captures_stack:
            entry = entry._with_stack(depth)

        source = None
        if self._config.include_sources:
            source = get_source(depth)

        stack_trace = ""
        if entry.frames:
            stack_trace = format_stack_trace(entry.err or message, entry.frames)

        with self._lock:
            record = replace(
                entry,
                severity=severity,
                message=message,
                source_location=source,
                stack_trace=stack_trace,
            )
            try:
                line = self._formatter.format(record)
            except (TypeError, ValueError, OverflowError, RecursionError) as e:
                self._metrics["dropped"] += 1
                print(f"could not marshal log: {e}", file=sys.stderr)
                return

            try:
                self._output.write(line + "\n")
                if hasattr(self._output, "flush"):
                    self._output.flush()
            except (OSError, ValueError) as e:
                self._metrics["dropped"] += 1
                print(f"could not write log: {e}", file=sys.stderr)
                return
            self._metrics["written"] += 1

    def get_metrics(self) -> dict:
        """Get logging metrics."""
        with self._lock:
            return self._metrics.copy()

    # Entry constructors, each starting from a fresh entry.

    def with_labels(self, labels: Mapping[str, Any]) -> Entry:
        return self.entry().with_labels(labels)

    def with_detail(self, key: str, value: Any) -> Entry:
        return self.entry().with_detail(key, value)

    def with_details(self, details: Mapping[str, Any]) -> Entry:
        return self.entry().with_details(details)

    def with_error(self, err: Optional[BaseException]) -> Entry:
        return self.entry().with_error(err)

    def with_span(self, span_context: SpanContext) -> Entry:
        return self.entry().with_span(span_context)

    def with_stack(self) -> Entry:
        return self.entry()._with_stack(1)

    def with_operation(self, id: str, producer: str) -> Entry:
        return self.entry().with_operation(id, producer)

    def start_operation(self, id: str, producer: str) -> Entry:
        """
        Start an operation with a given ID and producer.

        Logs the start of the operation at Notice level.
        """
        return self.entry()._start_operation(id, producer, 3)

    # Arguments are handled in the manner of print.

    def debug(self, *args: Any) -> None:
        """Send a message to the logger with severity Debug."""
        self.log(self._base, Severity.DEBUG, _sprint(args), 2)

    def info(self, *args: Any) -> None:
        """Send a message to the logger with severity Info."""
        self.log(self._base, Severity.INFO, _sprint(args), 2)

    def notice(self, *args: Any) -> None:
        """Send a message to the logger with severity Notice."""
        self.log(self._base, Severity.NOTICE, _sprint(args), 2)

    def warn(self, *args: Any) -> None:
        """Send a message to the logger with severity Warning."""
        self.log(self._base, Severity.WARNING, _sprint(args), 2)

    def error(self, *args: Any) -> None:
        """Send a message to the logger with severity Error."""
        self.log(self._base, Severity.ERROR, _sprint(args), 2)

    def critical(self, *args: Any) -> None:
        """Send a message to the logger with severity Critical."""
        self.log(self._base, Severity.CRITICAL, _sprint(args), 2)

    def alert(self, *args: Any) -> None:
        """Send a message to the logger with severity Alert."""
        self.log(self._base, Severity.ALERT, _sprint(args), 2)

    def emergency(self, *args: Any) -> None:
        """Send a message to the logger with severity Emergency."""
        self.log(self._base, Severity.EMERGENCY, _sprint(args), 2)

    # Arguments are handled in the manner of the % operator.

    def debugf(self, fmt: str, *args: Any) -> None:
        self.log(self._base, Severity.DEBUG, _sprintf(fmt, args), 2)

    def infof(self, fmt: str, *args: Any) -> None:
        self.log(self._base, Severity.INFO, _sprintf(fmt, args), 2)

    def noticef(self, fmt: str, *args: Any) -> None:
        self.log(self._base, Severity.NOTICE, _sprintf(fmt, args), 2)

    def warnf(self, fmt: str, *args: Any) -> None:
        self.log(self._base, Severity.WARNING, _sprintf(fmt, args), 2)

    def errorf(self, fmt: str, *args: Any) -> None:
        self.log(self._base, Severity.ERROR, _sprintf(fmt, args), 2)

    def criticalf(self, fmt: str, *args: Any) -> None:
        self.log(self._base, Severity.CRITICAL, _sprintf(fmt, args), 2)

    def alertf(self, fmt: str, *args: Any) -> None:
        self.log(self._base, Severity.ALERT, _sprintf(fmt, args), 2)

    def emergencyf(self, fmt: str, *args: Any) -> None:
        self.log(self._base, Severity.EMERGENCY, _sprintf(fmt, args), 2)

    warning = warn
    warningf = warnf


_default_lock = threading.Lock()
_default_logger: Optional[Logger] = None


def default_logger() -> Logger:
    """Process wide logger writing to stdout, created on first use."""
    global _default_logger
    if _default_logger is None:
        with _default_lock:
            if _default_logger is None:
                _default_logger = Logger()
    return _default_logger
