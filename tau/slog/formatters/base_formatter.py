"""Formatter interface used by Logger"""

from abc import ABC, abstractmethod

from tau.slog.entry import Entry


class BaseFormatter(ABC):
    """Renders an emitted entry as one line, without the trailing newline."""

    @abstractmethod
    def format(self, entry: Entry) -> str:
        raise NotImplementedError
