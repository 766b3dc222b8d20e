"""
Context propagation for entries

Carries an Entry in a contextvars.Context so request handlers can pick
up the entry prepared by middleware.
"""

import contextvars
from typing import Optional

from tau.slog.entry import Entry
from tau.slog.logger import default_logger

_entry_var: contextvars.ContextVar = contextvars.ContextVar("tau_slog_entry")


def with_context(ctx: Optional[contextvars.Context], entry: Entry) -> contextvars.Context:
    """
    Return a copy of ctx that carries entry.

    Args:
        ctx: Context to derive from, the current context when None
        entry: Entry to carry

    Returns:
        New Context, ctx itself is left unchanged
    """
    child = ctx.copy() if ctx is not None else contextvars.copy_context()
    child.run(_entry_var.set, entry)
    return child


def from_context(ctx: Optional[contextvars.Context] = None) -> Entry:
    """
    Return the Entry stored in ctx, or a new Entry if none exists.

    Args:
        ctx: Context to read, the current context when None
    """
    if ctx is None:
        entry = _entry_var.get(None)
    else:
        entry = ctx.get(_entry_var)
    if entry is None:
        return default_logger().entry()
    return entry


def set_entry(entry: Entry) -> contextvars.Token:
    """Bind entry to the current context, returns the token to reset it."""
    return _entry_var.set(entry)


def reset_entry(token: contextvars.Token) -> None:
    _entry_var.reset(token)
