"""
JSON formatter for structured logging

Produces one JSON object per line using the Cloud Logging special fields.
"""

import json
from datetime import date, datetime, time
from decimal import Decimal
from pathlib import PurePath
from typing import Any
from uuid import UUID

from tau.slog.entry import Entry
from tau.slog.formatters.base_formatter import BaseFormatter


class JSONFormatter(BaseFormatter):
    """
    Format entries as compact JSON objects.

    Fields left empty on the entry are omitted from the output.
    """

    def __init__(self, ensure_ascii: bool = False, sort_keys: bool = False):
        """
        Initialize JSON formatter.

        Args:
            ensure_ascii: Escape non-ASCII characters
            sort_keys: Sort keys, useful for deterministic output in tests
        """
        self.ensure_ascii = ensure_ascii
        self.sort_keys = sort_keys

    @staticmethod
    def default(value: Any) -> Any:
        """Encode the common non-JSON types found in details."""
        if isinstance(value, (datetime, date, time)):
            return value.isoformat()
        if isinstance(value, (Decimal, UUID, PurePath)):
            return str(value)
        if isinstance(value, (set, frozenset)):
            return sorted(value, key=repr)
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")

    def format(self, entry: Entry) -> str:
        """
        Format entry as JSON.

        Args:
            entry: Entry to format

        Returns:
            JSON string
        """
        return json.dumps(
            entry.to_dict(),
            default=self.default,
            ensure_ascii=self.ensure_ascii,
            sort_keys=self.sort_keys,
            separators=(",", ":"),
            allow_nan=False,
        )

    def __repr__(self) -> str:
        """String representation."""
        return f"JSONFormatter(ensure_ascii={self.ensure_ascii})"
