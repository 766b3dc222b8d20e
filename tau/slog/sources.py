"""
Caller location cache

Resolves the file, line and function of a call site once per
(code object, instruction offset) pair and serves repeats from memory.
"""

from __future__ import annotations

import sys
import threading
from types import CodeType, FrameType
from typing import Dict, Optional, Tuple

from tau.slog.entry import SourceLocation


def _function_name(frame: FrameType) -> str:
    """Qualified function name for a frame, e.g. ``pkg.mod.Class.method``."""
    code = frame.f_code
    name = getattr(code, "co_qualname", code.co_name)
    module = frame.f_globals.get("__name__")
    if module:
        return f"{module}.{name}"
    return name


class SourceCache:
    """
    Process wide cache of resolved call sites.

    Lookups are plain dictionary reads; only a miss takes the lock.
    Entries are never evicted since call sites are bounded by the
    program's code.
    """

    def __init__(self):
        self._sources: Dict[Tuple[CodeType, int], SourceLocation] = {}
        self._lock = threading.Lock()
        self._stats_lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def resolve(self, frame: FrameType) -> SourceLocation:
        """
        Resolve the source location of a frame.

        Args:
            frame: Frame currently executing the call site

        Returns:
            Cached SourceLocation for the call site
        """
        key = (frame.f_code, frame.f_lasti)
        source = self._sources.get(key)
        if source is not None:
            with self._stats_lock:
                self._hits += 1
            return source

        with self._lock:
            source = self._sources.get(key)
            if source is None:
                source = SourceLocation(
                    file=frame.f_code.co_filename,
                    line=str(frame.f_lineno),
                    function=_function_name(frame),
                )
                self._sources[key] = source
                with self._stats_lock:
                    self._misses += 1
            else:
                with self._stats_lock:
                    self._hits += 1
        return source

    def stats(self) -> dict:
        """Get hit/miss counters and the number of cached call sites."""
        with self._stats_lock:
            return {
                "hits": self._hits,
                "misses": self._misses,
                "size": len(self._sources),
            }

    def clear(self) -> None:
        """Drop every cached call site and reset counters."""
        with self._lock:
            self._sources.clear()
            with self._stats_lock:
                self._hits = 0
                self._misses = 0

    def __len__(self) -> int:
        return len(self._sources)


sources = SourceCache()


def get_source(depth: int) -> Optional[SourceLocation]:
    """
    Resolve the caller ``depth`` frames above the function calling this.

    Returns None when the stack is not that deep.
    """
    try:
        frame = sys._getframe(depth + 1)
    except ValueError:
        return None
    return sources.resolve(frame)
