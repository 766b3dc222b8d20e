"""
Logger configuration management
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass
class LoggerConfig:
    """Logger configuration."""

    # Include file, line and function of the call site
    include_sources: bool = True

    # Project used to qualify trace resource names
    project: str = ""

    # Maximum frames captured for the exception field
    stack_depth: int = 16

    # Format settings
    ensure_ascii: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.stack_depth <= 0:
            raise ValueError("stack_depth must be positive")

    @classmethod
    def default(cls) -> "LoggerConfig":
        """Create default configuration."""
        return cls()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LoggerConfig":
        """
        Create configuration from environment variables.

        Reads GOOGLE_CLOUD_PROJECT for the project and SLOG_INCLUDE_SOURCES
        to toggle source locations.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            New LoggerConfig instance
        """
        environ = os.environ if environ is None else environ
        config = cls(project=environ.get("GOOGLE_CLOUD_PROJECT", ""))
        sources = environ.get("SLOG_INCLUDE_SOURCES")
        if sources is not None:
            config.include_sources = sources.strip().lower() in TRUTHY
        return config
