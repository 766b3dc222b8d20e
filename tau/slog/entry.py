"""
Log entry data structure

Entries accumulate context for a log record before its severity and
message are fixed. Every ``with_*`` call returns an independent child;
the operation methods are the exception and update the entry in place.
See https://cloud.google.com/logging/docs/agent/configuration#special-fields
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Tuple

from opentelemetry.trace import SpanContext, format_span_id, format_trace_id

from tau.slog import stack
from tau.slog.severity import Severity

if TYPE_CHECKING:
    from tau.slog.logger import Logger

Fields = Dict[str, Any]

PREFIX = "logging.googleapis.com/"
LABELS_KEY = PREFIX + "labels"
SOURCE_LOCATION_KEY = PREFIX + "sourceLocation"
OPERATION_KEY = PREFIX + "operation"
TRACE_KEY = PREFIX + "trace"
SPAN_ID_KEY = PREFIX + "spanId"
TRACE_SAMPLED_KEY = PREFIX + "trace_sampled"


@dataclass(frozen=True)
class SourceLocation:
    """Source location that originated the log call."""

    file: str = ""
    line: str = ""
    function: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {k: v for k, v in (
            ("file", self.file),
            ("line", self.line),
            ("function", self.function),
        ) if v}


@dataclass
class Operation:
    """
    The operation a given log entry is part of.

    Instances are the mutable handle shared by with_operation,
    start_operation and end_operation on a single entry.
    """

    id: str = ""
    producer: str = ""
    first: bool = False
    last: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.id:
            data["id"] = self.id
        if self.producer:
            data["producer"] = self.producer
        if self.first:
            data["first"] = True
        if self.last:
            data["last"] = True
        return data


def _sprint(args: Tuple[Any, ...]) -> str:
    return " ".join(str(a) for a in args)


def _sprintf(fmt: str, args: Tuple[Any, ...]) -> str:
    if not args:
        return fmt
    try:
        return fmt % args
    except (TypeError, ValueError, KeyError):
        return f"{fmt} (bad format arguments: {args!r})"


@dataclass
class Entry:
    """
    Log entry with additional metadata included.

    ``message``, ``severity``, ``source_location`` and ``stack_trace`` are
    only populated on the snapshot written at emission time.
    """

    message: str = ""
    severity: Optional[Severity] = None
    labels: Optional[Dict[str, str]] = None
    details: Optional[Fields] = None
    source_location: Optional[SourceLocation] = None
    operation: Optional[Operation] = None
    trace: str = ""
    span_id: str = ""
    trace_sampled: bool = False
    err: str = ""
    stack_trace: str = ""
    logger: Optional["Logger"] = field(default=None, repr=False, compare=False)
    frames: Tuple[stack.Frame, ...] = field(default=(), repr=False, compare=False)

    @property
    def owner(self) -> "Logger":
        """Logger this entry writes to, the default logger when unset."""
        if self.logger is None:
            from tau.slog.logger import default_logger
            return default_logger()
        return self.logger

    def clone(self) -> "Entry":
        """Clone the entry so that changes to it do not affect the parent."""
        return replace(
            self,
            labels=dict(self.labels) if self.labels is not None else None,
            details=dict(self.details) if self.details is not None else None,
            operation=replace(self.operation) if self.operation is not None else None,
        )

    def with_labels(self, labels: Mapping[str, Any]) -> "Entry":
        """Labels for a given Entry, values converted to strings. Creates a child entry."""
        c = self.clone()
        if c.labels is None:
            c.labels = {}
        for k, v in labels.items():
            c.labels[k] = str(v)
        return c

    def with_detail(self, key: str, value: Any) -> "Entry":
        """Single detail for a given Entry. Creates a child entry."""
        c = self.clone()
        if c.details is None:
            c.details = {}
        c.details[key] = value
        return c

    def with_details(self, details: Mapping[str, Any]) -> "Entry":
        """Details for a given Entry. Creates a child entry."""
        c = self.clone()
        if c.details is None:
            c.details = {}
        c.details.update(details)
        return c

    def with_error(self, err: Optional[BaseException]) -> "Entry":
        """Error for a given Entry, None clears it. Creates a child entry."""
        c = self.clone()
        c.err = str(err) if err is not None else ""
        return c

    def with_span(self, span_context: SpanContext) -> "Entry":
        """
        Trace details for a given span. Creates a child entry.

        The trace is qualified with the logger's project; without a project
        the trace fields are left empty.
        """
        c = self.clone()
        project = self.owner.project
        if not project:
            c.trace = ""
            c.span_id = ""
            c.trace_sampled = False
            return c
        c.trace = f"projects/{project}/traces/{format_trace_id(span_context.trace_id)}"
        c.span_id = format_span_id(span_context.span_id)
        c.trace_sampled = span_context.trace_flags.sampled
        return c

    def with_stack(self) -> "Entry":
        """Call stack included in the exception field. Creates a child entry."""
        return self._with_stack(1)

    def _with_stack(self, skip: int) -> "Entry":
        c = self.clone()
        c.frames = stack.capture(skip + 1, self.owner.config.stack_depth)
        return c

    def with_operation(self, id: str, producer: str) -> "Entry":
        """Operation included in all logs written for this Entry. Updates in place."""
        self.operation = Operation(id=id, producer=producer)
        return self

    def start_operation(self, id: str, producer: str) -> "Entry":
        """
        Start an operation with a given ID and producer.

        Logs the start of the operation at Notice level, updates in place.
        """
        return self._start_operation(id, producer, 3)

    def _start_operation(self, id: str, producer: str, depth: int) -> "Entry":
        self.operation = Operation(id=id, producer=producer, first=True)
        self.owner.log(self, Severity.NOTICE, f"{producer} starting operation {id}", depth)
        self.operation.first = False
        return self

    def end_operation(self) -> None:
        """
        Stop any current operation, further logs will no longer include it.

        Logs the end of the operation at Notice level. Does nothing if no
        operation was started.
        """
        if self.operation is None:
            return
        self.operation.last = True
        op = self.operation
        self.owner.log(self, Severity.NOTICE, f"{op.producer} ending operation {op.id}", 2)
        self.operation = None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the structured record written as a single JSON line.

        Empty fields are omitted.
        """
        data: Dict[str, Any] = {"message": self.message}
        if self.severity is not None:
            data["severity"] = str(self.severity)
        if self.labels:
            data[LABELS_KEY] = self.labels
        if self.source_location is not None:
            data[SOURCE_LOCATION_KEY] = self.source_location.to_dict()
        if self.operation is not None:
            data[OPERATION_KEY] = self.operation.to_dict()
        if self.trace:
            data[TRACE_KEY] = self.trace
        if self.span_id:
            data[SPAN_ID_KEY] = self.span_id
        if self.trace_sampled:
            data[TRACE_SAMPLED_KEY] = True
        if self.details:
            data["details"] = self.details
        if self.err:
            data["error"] = self.err
        if self.stack_trace:
            data["exception"] = self.stack_trace
        return data

    # Arguments are handled in the manner of print.

    def debug(self, *args: Any) -> None:
        """Send a message with severity Debug."""
        self.owner.log(self, Severity.DEBUG, _sprint(args), 2)

    def info(self, *args: Any) -> None:
        """Send a message with severity Info."""
        self.owner.log(self, Severity.INFO, _sprint(args), 2)

    def notice(self, *args: Any) -> None:
        """Send a message with severity Notice."""
        self.owner.log(self, Severity.NOTICE, _sprint(args), 2)

    def warn(self, *args: Any) -> None:
        """Send a message with severity Warning."""
        self.owner.log(self, Severity.WARNING, _sprint(args), 2)

    def error(self, *args: Any) -> None:
        """Send a message with severity Error, including the call stack."""
        self.owner.log(self, Severity.ERROR, _sprint(args), 2)

    def critical(self, *args: Any) -> None:
        """Send a message with severity Critical, including the call stack."""
        self.owner.log(self, Severity.CRITICAL, _sprint(args), 2)

    def alert(self, *args: Any) -> None:
        """Send a message with severity Alert, including the call stack."""
        self.owner.log(self, Severity.ALERT, _sprint(args), 2)

    def emergency(self, *args: Any) -> None:
        """Send a message with severity Emergency, including the call stack."""
        self.owner.log(self, Severity.EMERGENCY, _sprint(args), 2)

    # Arguments are handled in the manner of the % operator.

    def debugf(self, fmt: str, *args: Any) -> None:
        self.owner.log(self, Severity.DEBUG, _sprintf(fmt, args), 2)

    def infof(self, fmt: str, *args: Any) -> None:
        self.owner.log(self, Severity.INFO, _sprintf(fmt, args), 2)

    def noticef(self, fmt: str, *args: Any) -> None:
        self.owner.log(self, Severity.NOTICE, _sprintf(fmt, args), 2)

    def warnf(self, fmt: str, *args: Any) -> None:
        self.owner.log(self, Severity.WARNING, _sprintf(fmt, args), 2)

    def errorf(self, fmt: str, *args: Any) -> None:
        self.owner.log(self, Severity.ERROR, _sprintf(fmt, args), 2)

    def criticalf(self, fmt: str, *args: Any) -> None:
        self.owner.log(self, Severity.CRITICAL, _sprintf(fmt, args), 2)

    def alertf(self, fmt: str, *args: Any) -> None:
        self.owner.log(self, Severity.ALERT, _sprintf(fmt, args), 2)

    def emergencyf(self, fmt: str, *args: Any) -> None:
        self.owner.log(self, Severity.EMERGENCY, _sprintf(fmt, args), 2)

    warning = warn
    warningf = warnf
