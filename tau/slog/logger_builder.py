"""Logger builder pattern"""

from typing import Optional, TextIO

from tau.slog.formatters.base_formatter import BaseFormatter
from tau.slog.logger import Logger
from tau.slog.logger_config import LoggerConfig


class LoggerBuilder:
    """Builder pattern for logger construction."""

    def __init__(self, config: Optional[LoggerConfig] = None):
        self._config = config or LoggerConfig()
        self._output: Optional[TextIO] = None
        self._formatter: Optional[BaseFormatter] = None

    def with_output(self, output: TextIO) -> "LoggerBuilder":
        """Set output stream, stdout when never set."""
        self._output = output
        return self

    def with_project(self, project: str) -> "LoggerBuilder":
        """Set project used to qualify traces."""
        self._config.project = project
        return self

    def with_sources(self, enabled: bool = True) -> "LoggerBuilder":
        """Enable/disable source locations."""
        self._config.include_sources = enabled
        return self

    def with_stack_depth(self, depth: int) -> "LoggerBuilder":
        """
        Set the maximum number of frames captured for stack traces.

        Raises:
            ValueError: If depth is not positive
        """
        if depth <= 0:
            raise ValueError("stack_depth must be positive")
        self._config.stack_depth = depth
        return self

    def with_ascii(self, enabled: bool = True) -> "LoggerBuilder":
        """Escape non-ASCII characters in the output."""
        self._config.ensure_ascii = enabled
        return self

    def with_formatter(self, formatter: BaseFormatter) -> "LoggerBuilder":
        """
        Use a custom formatter.

        Args:
            formatter: Formatter instance (BaseFormatter subclass)

        Returns:
            Self for method chaining

        Example:
            logger = (LoggerBuilder()
                .with_formatter(JSONFormatter(sort_keys=True))
                .build())
        """
        self._formatter = formatter
        return self

    def build(self) -> Logger:
        """Build and return configured logger."""
        return Logger(self._output, self._config, self._formatter)
