"""
Structured logger for Cloud Logging

Entries are written as newline delimited JSON using the special fields
understood by the Cloud Logging agent:

- Logger: thread-safe writer owning the output
- Entry: branchable context for a record
- Severity: severity enumeration
- LoggerConfig / LoggerBuilder: configuration
"""

from tau.slog.api import (
    alert,
    alertf,
    critical,
    criticalf,
    debug,
    debugf,
    emergency,
    emergencyf,
    error,
    errorf,
    info,
    infof,
    new_entry,
    notice,
    noticef,
    set_include_sources,
    set_output,
    set_project,
    start_operation,
    warn,
    warnf,
    warning,
    warningf,
    with_detail,
    with_details,
    with_error,
    with_labels,
    with_operation,
    with_span,
    with_stack,
)
from tau.slog.context import from_context, reset_entry, set_entry, with_context
from tau.slog.entry import Entry, Fields, Operation, SourceLocation
from tau.slog.logger import Logger, default_logger
from tau.slog.logger_builder import LoggerBuilder
from tau.slog.logger_config import LoggerConfig
from tau.slog.severity import Severity
from tau.slog.sources import SourceCache, sources

# Import submodules (not all classes by default)
from tau.slog import formatters

__all__ = [
    "Logger",
    "LoggerBuilder",
    "LoggerConfig",
    "Entry",
    "Fields",
    "Operation",
    "SourceLocation",
    "Severity",
    "SourceCache",
    "sources",
    "default_logger",
    "formatters",
    "new_entry",
    "set_output",
    "set_project",
    "set_include_sources",
    "with_labels",
    "with_detail",
    "with_details",
    "with_error",
    "with_span",
    "with_stack",
    "with_operation",
    "start_operation",
    "with_context",
    "from_context",
    "set_entry",
    "reset_entry",
    "debug",
    "debugf",
    "info",
    "infof",
    "notice",
    "noticef",
    "warn",
    "warnf",
    "warning",
    "warningf",
    "error",
    "errorf",
    "critical",
    "criticalf",
    "alert",
    "alertf",
    "emergency",
    "emergencyf",
]
