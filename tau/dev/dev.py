"""
Convenience functions for development

Failing fast on errors and a not implemented error carrying the caller.
"""

import sys
from typing import Optional


def fail_fast(err: Optional[BaseException]) -> None:
    """
    Raise err if it is not None.

    Marks conditions that are unrecoverable, such as broken startup config.
    """
    if err is not None:
        raise err


verify = fail_fast


class UnimplementedError(NotImplementedError):
    """
    Something still needs to be built as part of development.

    Should never be used in production.
    """

    def __init__(self, file: str = "unknown", line: int = -1, function: str = "unknown"):
        super().__init__(f"not implemented: {function}")
        self.file = file
        self.line = line
        self.function = function

    def __str__(self) -> str:
        return f"not implemented: {self.function}"


def not_implemented() -> UnimplementedError:
    """
    Return an error detailing that the calling function is not implemented.

    It contains information on the file, line and function of the caller.
    """
    try:
        frame = sys._getframe(1)
    except ValueError:
        return UnimplementedError()
    code = frame.f_code
    name = getattr(code, "co_qualname", code.co_name)
    module = frame.f_globals.get("__name__")
    function = f"{module}.{name}" if module else name
    return UnimplementedError(code.co_filename, frame.f_lineno, function)
