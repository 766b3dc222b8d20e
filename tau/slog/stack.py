"""Call stack capture and rendering for the exception field."""

import sys
from types import FrameType
from typing import NamedTuple, Optional, Sequence, Tuple


class Frame(NamedTuple):
    """A single captured frame."""

    file: str
    line: int
    function: str


def capture(skip: int = 0, limit: int = 16) -> Tuple[Frame, ...]:
    """
    Capture the current call stack without reading source files.

    Args:
        skip: Frames to skip above the caller of capture (0 keeps the caller)
        limit: Maximum number of frames recorded

    Returns:
        Captured frames, innermost first
    """
    try:
        frame: Optional[FrameType] = sys._getframe(skip + 1)
    except ValueError:
        return ()

    frames = []
    while frame is not None and len(frames) < limit:
        code = frame.f_code
        frames.append(Frame(code.co_filename, frame.f_lineno, code.co_name))
        frame = frame.f_back
    return tuple(frames)


def format_stack_trace(description: str, frames: Sequence[Frame]) -> str:
    """
    Format frames the way Error Reporting recognizes Python tracebacks.

    Args:
        description: Leading line, usually the error or message
        frames: Frames captured by capture(), innermost first

    Returns:
        Multi-line traceback text
    """
    lines = [f"{description}:", "", "Traceback (most recent call last):"]
    for frame in reversed(frames):
        lines.append(f'  File "{frame.file}", line {frame.line}, in {frame.function}')
    return "\n".join(lines) + "\n"
