"""
Log formatters module

Formatters turn an emitted Entry into the single line written to the output.
"""

from tau.slog.formatters.base_formatter import BaseFormatter
from tau.slog.formatters.json_formatter import JSONFormatter

__all__ = [
    "BaseFormatter",
    "JSONFormatter",
]
