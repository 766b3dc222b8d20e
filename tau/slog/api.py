"""
Package level logging functions

Every function writes through the default logger, see default_logger().
"""

from typing import Any, Mapping, Optional, TextIO

from opentelemetry.trace import SpanContext

from tau.slog.entry import Entry, _sprint, _sprintf
from tau.slog.logger import default_logger
from tau.slog.severity import Severity


def set_output(output: TextIO) -> None:
    """Set output destination for the package-level logger."""
    default_logger().set_output(output)


def set_project(project: str) -> None:
    """Set project for the package-level logger."""
    default_logger().set_project(project)


def set_include_sources(include: bool) -> None:
    """Include file, line and function for the package-level logger."""
    default_logger().set_include_sources(include)


def new_entry() -> Entry:
    return default_logger().entry()


def with_labels(labels: Mapping[str, Any]) -> Entry:
    return default_logger().entry().with_labels(labels)


def with_detail(key: str, value: Any) -> Entry:
    return default_logger().entry().with_detail(key, value)


def with_details(details: Mapping[str, Any]) -> Entry:
    return default_logger().entry().with_details(details)


def with_error(err: Optional[BaseException]) -> Entry:
    return default_logger().entry().with_error(err)


def with_span(span_context: SpanContext) -> Entry:
    return default_logger().entry().with_span(span_context)


def with_stack() -> Entry:
    return default_logger().entry()._with_stack(1)


def with_operation(id: str, producer: str) -> Entry:
    return default_logger().entry().with_operation(id, producer)


def start_operation(id: str, producer: str) -> Entry:
    """Start an operation, logging its start at Notice level."""
    return default_logger().entry()._start_operation(id, producer, 3)


def debug(*args: Any) -> None:
    std = default_logger()
    std.log(std.base, Severity.DEBUG, _sprint(args), 2)


def info(*args: Any) -> None:
    std = default_logger()
    std.log(std.base, Severity.INFO, _sprint(args), 2)


def notice(*args: Any) -> None:
    std = default_logger()
    std.log(std.base, Severity.NOTICE, _sprint(args), 2)


def warn(*args: Any) -> None:
    std = default_logger()
    std.log(std.base, Severity.WARNING, _sprint(args), 2)


def error(*args: Any) -> None:
    std = default_logger()
    std.log(std.base, Severity.ERROR, _sprint(args), 2)


def critical(*args: Any) -> None:
    std = default_logger()
    std.log(std.base, Severity.CRITICAL, _sprint(args), 2)


def alert(*args: Any) -> None:
    std = default_logger()
    std.log(std.base, Severity.ALERT, _sprint(args), 2)


def emergency(*args: Any) -> None:
    std = default_logger()
    std.log(std.base, Severity.EMERGENCY, _sprint(args), 2)


def debugf(fmt: str, *args: Any) -> None:
    std = default_logger()
    std.log(std.base, Severity.DEBUG, _sprintf(fmt, args), 2)


def infof(fmt: str, *args: Any) -> None:
    std = default_logger()
    std.log(std.base, Severity.INFO, _sprintf(fmt, args), 2)


def noticef(fmt: str, *args: Any) -> None:
    std = default_logger()
    std.log(std.base, Severity.NOTICE, _sprintf(fmt, args), 2)


def warnf(fmt: str, *args: Any) -> None:
    std = default_logger()
    std.log(std.base, Severity.WARNING, _sprintf(fmt, args), 2)


def errorf(fmt: str, *args: Any) -> None:
    std = default_logger()
    std.log(std.base, Severity.ERROR, _sprintf(fmt, args), 2)


def criticalf(fmt: str, *args: Any) -> None:
    std = default_logger()
    std.log(std.base, Severity.CRITICAL, _sprintf(fmt, args), 2)


def alertf(fmt: str, *args: Any) -> None:
    std = default_logger()
    std.log(std.base, Severity.ALERT, _sprintf(fmt, args), 2)


def emergencyf(fmt: str, *args: Any) -> None:
    std = default_logger()
    std.log(std.base, Severity.EMERGENCY, _sprintf(fmt, args), 2)


warning = warn
warningf = warnf
